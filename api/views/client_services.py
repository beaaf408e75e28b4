# api/views/client_services.py
import logging
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from django.db import DatabaseError
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend

# Importaciones relativas
from ..models import Client, ClientService, Service
from ..permissions import IsAuthenticated
from ..serializers.client_services import (
    ClientServiceAssignSerializer, ClientServiceNotesSerializer, ClientServiceSerializer,
)
from ..services import (
    ALREADY_ASSIGNED, ALREADY_ASSIGNED_MESSAGE, ClientServiceHealthService, ClientServiceManager,
)
from ..tenancy import TenantScopedMixin, get_request_tenant

logger = logging.getLogger(__name__)


class ClientServiceViewSet(TenantScopedMixin,
                           mixins.ListModelMixin,
                           mixins.RetrieveModelMixin,
                           mixins.DestroyModelMixin,
                           viewsets.GenericViewSet):
    """
    ViewSet para las asociaciones cliente-servicio.
    La creación es idempotente: un par ya existente responde 200 con status 'already_assigned'.
    """
    queryset = ClientService.objects.select_related('client', 'servicio')
    serializer_class = ClientServiceSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['client', 'servicio']
    tenant_field = 'client__tenant'

    def _get_client(self, client_id):
        clients = Client.objects.all()
        tenant = get_request_tenant(self.request)
        if tenant is not None:
            clients = clients.filter(tenant=tenant)
        return get_object_or_404(clients, pk=client_id)

    def create(self, request, *args, **kwargs):
        input_serializer = ClientServiceAssignSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data

        client = self._get_client(data['client_id'])
        servicio = get_object_or_404(Service, pk=data['servicio_id'])

        association, created = ClientServiceManager.assign(
            client, servicio, notas=data.get('notas'), fecha_asignacion=data.get('fecha_asignacion')
        )
        payload = {'association': ClientServiceSerializer(association).data}
        if created:
            payload['status'] = 'assigned'
            return Response(payload, status=status.HTTP_201_CREATED)
        payload.update({'status': ALREADY_ASSIGNED, 'message': ALREADY_ASSIGNED_MESSAGE})
        return Response(payload, status=status.HTTP_200_OK)

    def update(self, request, *args, **kwargs):
        """ PUT <id>/: solo se editan las notas. """
        association = self.get_object()
        notes_serializer = ClientServiceNotesSerializer(data=request.data)
        notes_serializer.is_valid(raise_exception=True)
        ClientServiceManager.update_notes(association, notes_serializer.validated_data['notas'])
        return Response(ClientServiceSerializer(association).data)

    @action(detail=False, methods=['get'], url_path=r'cliente/(?P<client_id>\d+)')
    def by_client(self, request, client_id=None):
        client = self._get_client(client_id)
        associations = self.get_queryset().filter(client=client)
        return Response(ClientServiceSerializer(associations, many=True).data)

    @action(detail=False, methods=['get'], url_path=r'service/(?P<service_id>\d+)')
    def by_service(self, request, service_id=None):
        servicio = get_object_or_404(Service, pk=service_id)
        associations = self.get_queryset().filter(servicio=servicio)
        return Response(ClientServiceSerializer(associations, many=True).data)

    @action(detail=False, methods=['get'], url_path=r'cliente/(?P<client_id>\d+)/count')
    def count_for_client(self, request, client_id=None):
        client = self._get_client(client_id)
        return Response({'count': ClientService.objects.filter(client=client).count()})

    @action(detail=False, methods=['delete'], url_path=r'cliente/(?P<client_id>\d+)/service/(?P<service_id>\d+)')
    def unassign(self, request, client_id=None, service_id=None):
        client = self._get_client(client_id)
        deleted = ClientServiceManager.unassign(client.pk, service_id)
        if not deleted:
            return Response({"detail": "Client-service association not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response({"detail": "Client-service association deleted successfully", "deleted": deleted})

    @action(detail=False, methods=['post'], url_path='health-check')
    def health_check(self, request):
        try:
            report = ClientServiceHealthService.run()
        except DatabaseError as e:
            logger.error(f"[ClientServiceViewSet] Error en el health check: {e}", exc_info=True)
            return Response(
                {'success': False, 'report': {'issues': [str(e)], 'fixed': [], 'success': False}},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response({'success': report['success'], 'report': report})
