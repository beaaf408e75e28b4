# api/views/utilities.py
from rest_framework import viewsets
from django_filters.rest_framework import DjangoFilterBackend

# Importaciones relativas
from ..models import AuditLog
from ..permissions import CanViewAuditLogs
from ..serializers.utilities import AuditLogSerializer


class AuditLogViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet de solo lectura para ver los Registros de Auditoría (Audit Logs).
    """
    queryset = AuditLog.objects.select_related('user').all().order_by('-timestamp')
    serializer_class = AuditLogSerializer
    permission_classes = [CanViewAuditLogs]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = {
        'user__username': ['exact', 'icontains'],
        'action': ['exact', 'icontains'],
        'timestamp': ['date', 'date__gte', 'date__lte', 'year', 'month'],
    }
