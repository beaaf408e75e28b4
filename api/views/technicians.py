# api/views/technicians.py
import logging
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from django.db.models import Count
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend

# Importaciones relativas
from ..models import Technician, TechnicianEvaluation, TechnicianObjective
from ..pagination import RowsPagination, SortingMixin
from ..permissions import IsAuthenticated, CanManageTeam
from ..serializers.evaluations import TechnicianEvaluationSerializer
from ..serializers.technicians import (
    TechnicianObjectiveSerializer, TechnicianObjectiveStatusSerializer, TechnicianSerializer,
)
from ..services import TechnicianService
from ..tenancy import TenantScopedMixin, get_request_tenant

logger = logging.getLogger(__name__)


def _write_permissions(action_name):
    if action_name in ['list', 'retrieve']:
        return [IsAuthenticated]
    return [CanManageTeam]


class TechnicianViewSet(SortingMixin, TenantScopedMixin, viewsets.ModelViewSet):
    """
    ViewSet para gestionar Técnicos. DELETE con clientes asignados responde 409
    salvo que se indique ?force=true.
    """
    queryset = Technician.objects.annotate(client_count=Count('clients', distinct=True))
    serializer_class = TechnicianSerializer
    pagination_class = RowsPagination
    filter_backends = [DjangoFilterBackend]
    filterset_fields = {
        'nombre': ['exact', 'icontains'],
        'especialidad': ['exact', 'icontains'],
        'estado': ['exact'],
    }
    sortable_fields = {
        'nombre': 'nombre',
        'email': 'email',
        'especialidad': 'especialidad',
        'estado': 'estado',
        'client_count': 'client_count',
        'created_at': 'created_at',
    }
    default_sort = ['nombre', 'id']

    def get_queryset(self):
        return self.sort_queryset(super().get_queryset())

    def get_permissions(self):
        self.permission_classes = _write_permissions(self.action)
        return super().get_permissions()

    def destroy(self, request, *args, **kwargs):
        technician = self.get_object()
        force = request.query_params.get('force', '').lower() in ('1', 'true', 'yes')
        result = TechnicianService.delete(technician, force=force)
        if not result['deleted']:
            return Response({
                "detail": "El técnico tiene clientes asignados. Usa force=true para desasignarlos y eliminarlo.",
                "can_force_delete": True,
                "client_count": result['client_count'],
            }, status=status.HTTP_409_CONFLICT)
        return Response({
            "detail": "Técnico eliminado correctamente.",
            "unassigned_clients": result['unassigned_clients'],
        }, status=status.HTTP_200_OK)


class TechnicianNestedMixin:
    """ Resuelve el técnico de la URL anidada (tecnicos/<tecnico_pk>/...). """

    def get_technician(self):
        if not hasattr(self, '_technician'):
            technicians = Technician.objects.all()
            tenant = get_request_tenant(self.request)
            if tenant is not None:
                technicians = technicians.filter(tenant=tenant)
            self._technician = get_object_or_404(technicians, pk=self.kwargs['tecnico_pk'])
        return self._technician

    def get_permissions(self):
        self.permission_classes = _write_permissions(self.action)
        return super().get_permissions()


class TechnicianEvaluationViewSet(TechnicianNestedMixin, viewsets.ModelViewSet):
    """
    Evaluaciones semestrales de un técnico, más recientes primero.
    Una evaluación en estado 'final' no admite cambios.
    """
    serializer_class = TechnicianEvaluationSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['year', 'semester', 'status']
    pagination_class = None

    def get_queryset(self):
        return TechnicianEvaluation.objects.filter(technician=self.get_technician()).order_by('-year', '-semester')

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if 'tecnico_pk' in self.kwargs:
            context['technician'] = self.get_technician()
        return context

    def perform_create(self, serializer):
        serializer.save(technician=self.get_technician())

    def perform_destroy(self, instance):
        evaluation_id = instance.pk
        instance.delete()
        logger.info(f"[TechnicianEvaluationViewSet] Evaluación {evaluation_id} eliminada por {self.request.user.username}")


class TechnicianObjectiveViewSet(TechnicianNestedMixin, viewsets.ModelViewSet):
    """
    Objetivos individuales de un técnico.
    """
    serializer_class = TechnicianObjectiveSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['status', 'is_next_objective', 'completed']
    pagination_class = None

    def get_queryset(self):
        return TechnicianObjective.objects.filter(technician=self.get_technician())

    def perform_create(self, serializer):
        serializer.save(technician=self.get_technician())

    @action(detail=True, methods=['patch'], url_path='status')
    def set_status(self, request, tecnico_pk=None, pk=None):
        objective = self.get_object()
        status_serializer = TechnicianObjectiveStatusSerializer(data=request.data)
        status_serializer.is_valid(raise_exception=True)
        objective.completed = status_serializer.validated_data['completed']
        objective.status = 'completado' if objective.completed else 'en_progreso'
        objective.save(update_fields=['completed', 'status', 'updated_at'])
        logger.debug(f"[TechnicianObjectiveViewSet] Objetivo {objective.pk} marcado completed={objective.completed}")
        return Response(self.get_serializer(objective).data)
