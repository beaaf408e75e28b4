# api/views/objectives.py
import logging
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend

# Importaciones relativas
from ..models import (
    QualitativeObjective, QuantitativeObjective, QuantitativeObjectiveTemplate,
    SalespersonQuantitativeObjective,
)
from ..permissions import IsAuthenticated, CanManageObjectives
from ..serializers.objectives import (
    AssignObjectiveSerializer, QualitativeEvidenceSerializer, QualitativeObjectiveSerializer,
    QualitativeStatusSerializer, QuantitativeAssignmentSerializer, QuantitativeObjectiveSerializer,
    QuantitativeObjectiveTemplateSerializer, UpdateAssignmentSerializer,
)
from ..services import ObjectiveAssignmentService
from ..tenancy import HasPlanFeature, TenantScopedMixin

logger = logging.getLogger(__name__)


class ObjectivePermissionsMixin:
    """ Lectura para autenticados, escritura para admin/manager; el plan debe incluir 'objectives'. """
    required_feature = 'objectives'

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            self.permission_classes = [IsAuthenticated, HasPlanFeature]
        else:
            self.permission_classes = [CanManageObjectives, HasPlanFeature]
        return super().get_permissions()


class QuantitativeObjectiveTemplateViewSet(ObjectivePermissionsMixin, viewsets.ModelViewSet):
    queryset = QuantitativeObjectiveTemplate.objects.all()
    serializer_class = QuantitativeObjectiveTemplateSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['type']


class QuantitativeObjectiveViewSet(ObjectivePermissionsMixin, TenantScopedMixin, viewsets.ModelViewSet):
    """
    ViewSet para Objetivos Cuantitativos y su reparto entre vendedores.
    """
    queryset = QuantitativeObjective.objects.prefetch_related('assignments__salesperson', 'assignments__objective')
    serializer_class = QuantitativeObjectiveSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = {
        'type': ['exact'],
        'status': ['exact'],
        'is_global': ['exact'],
        'start_date': ['gte', 'lte'],
        'end_date': ['gte', 'lte'],
        'name': ['icontains'],
    }
    plan_limit_resource = 'objectives'

    @action(detail=True, methods=['post'], url_path='assign')
    def assign(self, request, pk=None):
        objective = self.get_object()
        input_serializer = AssignObjectiveSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        results = ObjectiveAssignmentService.assign(objective, input_serializer.validated_data['assignments'])
        objective.refresh_from_db()
        return Response({
            'results': results,
            'objective': QuantitativeObjectiveSerializer(objective, context=self.get_serializer_context()).data,
        })

    @action(detail=True, methods=['delete'], url_path=r'assign/(?P<assignment_id>\d+)')
    def unassign(self, request, pk=None, assignment_id=None):
        objective = self.get_object()
        assignment = get_object_or_404(SalespersonQuantitativeObjective, pk=assignment_id, objective=objective)
        assignment.delete()
        logger.info(f"[QuantitativeObjectiveViewSet] Asignación {assignment_id} eliminada del objetivo {objective.pk}")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['post'], url_path='assign-global')
    def assign_global(self, request):
        result = ObjectiveAssignmentService.assign_global()
        return Response(result)

    @action(detail=False, methods=['patch'], url_path='update-assignment')
    def update_assignment(self, request):
        input_serializer = UpdateAssignmentSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data
        assignment = get_object_or_404(
            SalespersonQuantitativeObjective.objects.select_related('objective', 'salesperson'),
            pk=data['assignment_id'], objective__in=self.get_queryset(),
        )
        assignment = ObjectiveAssignmentService.update_assignment(
            assignment,
            individual_target=data.get('individual_target'),
            monthly_progress=data.get('monthly_progress'),
        )
        return Response(QuantitativeAssignmentSerializer(assignment).data)


class QualitativeObjectiveViewSet(ObjectivePermissionsMixin, TenantScopedMixin, viewsets.ModelViewSet):
    """
    ViewSet para Objetivos Cualitativos.
    """
    queryset = QualitativeObjective.objects.prefetch_related('salespersons')
    serializer_class = QualitativeObjectiveSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = {
        'status': ['exact'],
        'is_global': ['exact'],
        'salespersons': ['exact'],
        'due_date': ['gte', 'lte'],
        'name': ['icontains'],
    }
    plan_limit_resource = 'objectives'

    @action(detail=True, methods=['put'], url_path='status')
    def set_status(self, request, pk=None):
        objective = self.get_object()
        input_serializer = QualitativeStatusSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        objective.status = input_serializer.validated_data['status']
        if 'completion_date' in input_serializer.validated_data:
            objective.completion_date = input_serializer.validated_data['completion_date']
        elif objective.status == 'completado' and not objective.completion_date:
            objective.completion_date = timezone.localdate()
        objective.save(update_fields=['status', 'completion_date', 'updated_at'])
        logger.info(f"[QualitativeObjectiveViewSet] Objetivo {objective.pk} -> {objective.status}")
        return Response(self.get_serializer(objective).data)

    @action(detail=True, methods=['put'], url_path='evidence')
    def set_evidence(self, request, pk=None):
        objective = self.get_object()
        input_serializer = QualitativeEvidenceSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        objective.evidence = input_serializer.validated_data['evidence']
        update_fields = ['evidence', 'updated_at']
        if 'comments' in input_serializer.validated_data:
            objective.comments = input_serializer.validated_data['comments']
            update_fields.append('comments')
        objective.save(update_fields=update_fields)
        return Response(self.get_serializer(objective).data)
