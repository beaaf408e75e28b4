# api/views/clients.py
import logging
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from django.db.models import Prefetch
from django_filters import rest_framework as filters

# Importaciones relativas
from ..models import Client, ClientService, Service
from ..pagination import RowsPagination, SortingMixin
from ..permissions import IsAuthenticated
from ..serializers.base import ServiceBasicSerializer
from ..serializers.clients import ClientMatrixSerializer, ClientSerializer
from ..tenancy import HasPlanFeature, TenantScopedMixin

logger = logging.getLogger(__name__)


class ClientFilter(filters.FilterSet):
    nombre = filters.CharFilter(lookup_expr='icontains')
    vendedor = filters.NumberFilter(field_name='vendedor_id')
    tecnico = filters.NumberFilter(field_name='tecnico_id')
    contrato_soporte = filters.BooleanFilter()

    class Meta:
        model = Client
        fields = ['nombre', 'vendedor', 'tecnico', 'contrato_soporte']


class ClientViewSet(SortingMixin, TenantScopedMixin, viewsets.ModelViewSet):
    """
    ViewSet para gestionar Clientes.
    """
    queryset = Client.objects.select_related('vendedor', 'tecnico').prefetch_related('servicios')
    serializer_class = ClientSerializer
    pagination_class = RowsPagination
    filter_backends = [filters.DjangoFilterBackend]
    filterset_class = ClientFilter
    plan_limit_resource = 'clients'
    required_feature = None
    sortable_fields = {
        'nombre': 'nombre',
        'email': 'email',
        'contrato_soporte': 'contrato_soporte',
        'fecha_ultimo_relevamiento': 'fecha_ultimo_relevamiento',
        'vendedor': 'vendedor__nombre',
        'tecnico': 'tecnico__nombre',
        'created_at': 'created_at',
    }
    default_sort = ['nombre', 'id']

    def get_queryset(self):
        return self.sort_queryset(super().get_queryset())

    def get_permissions(self):
        if self.action == 'matrix_data':
            self.required_feature = 'client_matrix'
            self.permission_classes = [IsAuthenticated, HasPlanFeature]
        else:
            self.permission_classes = [IsAuthenticated]
        return super().get_permissions()

    def perform_destroy(self, instance):
        client_id = instance.pk
        instance.delete()  # Las asociaciones se eliminan en cascada
        logger.info(f"[ClientViewSet] Cliente {client_id} eliminado por {self.request.user.username}")

    @action(detail=False, methods=['get'], url_path='summary')
    def summary(self, request):
        clients = self.get_tenant_queryset()
        return Response({
            'total_clients': clients.count(),
            'active_service_contracts': clients.filter(contrato_soporte=True).count(),
            'total_services': ClientService.objects.filter(client__in=clients).count(),
        })

    @action(detail=False, methods=['get'], url_path='matrix/data')
    def matrix_data(self, request):
        """ Clientes (con IDs de servicios asignados) y catálogo completo, ordenados por nombre. """
        clients = self.get_tenant_queryset().select_related('vendedor', 'tecnico').prefetch_related(
            Prefetch('service_links', queryset=ClientService.objects.only('id', 'client_id', 'servicio_id'))
        )
        vendedor = request.query_params.get('vendedor')
        tecnico = request.query_params.get('tecnico')
        if vendedor:
            clients = clients.filter(vendedor_id=vendedor)
        if tecnico:
            clients = clients.filter(tecnico_id=tecnico)
        clients = clients.order_by('nombre', 'id')
        services = Service.objects.order_by('nombre')
        logger.info(f"[ClientViewSet] Matriz: {clients.count()} clientes, {services.count()} servicios")
        return Response({
            'clients': ClientMatrixSerializer(clients, many=True).data,
            'services': ServiceBasicSerializer(services, many=True).data,
        })
