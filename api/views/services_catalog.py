# api/views/services_catalog.py
from rest_framework import viewsets
from django.db.models import Count
from django_filters.rest_framework import DjangoFilterBackend

# Importaciones relativas
from ..models import Service
from ..permissions import IsAuthenticated, CanManageCatalog
from ..serializers.services_catalog import ServiceSerializer


class ServiceViewSet(viewsets.ModelViewSet):
    """
    ViewSet para gestionar Servicios del catálogo.
    """
    queryset = Service.objects.annotate(client_count=Count('client_links__client', distinct=True)).order_by('categoria', 'nombre')
    serializer_class = ServiceSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = {
        'categoria': ['exact', 'icontains'],
        'nombre': ['exact', 'icontains'],
    }

    def get_permissions(self):
        """ Permisos: lectura para autenticados, escritura restringida. """
        if self.action in ['list', 'retrieve']:
            self.permission_classes = [IsAuthenticated]
        else:
            self.permission_classes = [CanManageCatalog]
        return super().get_permissions()
