# api/views/salespersons.py
import logging
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from django.db.models import Count
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend

# Importaciones relativas
from ..models import Salesperson, SalespersonQuantitativeObjective
from ..permissions import IsAuthenticated, CanManageTeam
from ..serializers.objectives import MonthlyProgressSerializer, QuantitativeAssignmentSerializer
from ..serializers.salespersons import (
    SalespersonBasicInfoSerializer, SalespersonObjectivesSerializer, SalespersonSerializer,
)
from ..services import ObjectiveAssignmentService, SalespersonProgressService
from ..tenancy import HasPlanFeature, TenantScopedMixin

logger = logging.getLogger(__name__)


class SalespersonViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    """
    ViewSet para Vendedores, con su progreso de objetivos y el dashboard comercial.
    """
    queryset = Salesperson.objects.annotate(client_count=Count('clients', distinct=True)).order_by('nombre')
    serializer_class = SalespersonSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = {
        'nombre': ['exact', 'icontains'],
        'email': ['exact', 'icontains'],
        'estado': ['exact'],
    }
    required_feature = None

    def get_permissions(self):
        if self.action == 'dashboard':
            self.required_feature = 'dashboard'
            self.permission_classes = [IsAuthenticated, HasPlanFeature]
        elif self.action in ['list', 'retrieve', 'basic', 'objectives']:
            self.permission_classes = [IsAuthenticated]
        else:
            self.permission_classes = [CanManageTeam]
        return super().get_permissions()

    def destroy(self, request, *args, **kwargs):
        salesperson = self.get_object()
        summary = SalespersonProgressService.delete(salesperson)
        return Response({"detail": "Vendedor eliminado correctamente.", **summary}, status=status.HTTP_200_OK)

    @action(detail=True, methods=['get'], url_path='basic')
    def basic(self, request, pk=None):
        return Response(SalespersonBasicInfoSerializer(self.get_object()).data)

    @action(detail=True, methods=['get'], url_path='objectives')
    def objectives(self, request, pk=None):
        salesperson = self.get_object()
        serializer = SalespersonObjectivesSerializer(salesperson, context=self.get_serializer_context())
        return Response({**serializer.data, **SalespersonProgressService.for_salesperson(salesperson)})

    @action(detail=True, methods=['post'], url_path='objectives/monthly')
    def monthly_progress(self, request, pk=None):
        """ Registra el valor de un mes en una asignación cuantitativa del vendedor. """
        salesperson = self.get_object()
        input_serializer = MonthlyProgressSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data
        assignment = get_object_or_404(
            SalespersonQuantitativeObjective.objects.select_related('objective', 'salesperson'),
            pk=data['assignment_id'], salesperson=salesperson,
        )
        assignment = ObjectiveAssignmentService.record_monthly_progress(assignment, data['month'], data['value'])
        return Response(QuantitativeAssignmentSerializer(assignment).data)

    @action(detail=False, methods=['get'], url_path='dashboard')
    def dashboard(self, request):
        return Response(SalespersonProgressService.dashboard())
