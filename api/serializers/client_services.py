# api/serializers/client_services.py
"""
Serializers para las asociaciones cliente-servicio.
"""
from rest_framework import serializers
from django.utils.translation import gettext_lazy as _

from ..models import ClientService
from .base import ServiceBasicSerializer

class ClientServiceSerializer(serializers.ModelSerializer):
    """ Serializer para MOSTRAR una asociación. """
    client_id = serializers.IntegerField(read_only=True)
    servicio_id = serializers.IntegerField(read_only=True)
    client_nombre = serializers.CharField(source='client.nombre', read_only=True)
    servicio = ServiceBasicSerializer(read_only=True)

    class Meta:
        model = ClientService
        fields = [
            'id', 'client_id', 'client_nombre', 'servicio_id', 'servicio',
            'fecha_asignacion', 'notas', 'detalles', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

class ClientServiceAssignSerializer(serializers.Serializer):
    """ Entrada de POST /cliente-servicios/. Los IDs se resuelven en la vista (404 si no existen). """
    client_id = serializers.IntegerField()
    servicio_id = serializers.IntegerField()
    notas = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True, default='')
    fecha_asignacion = serializers.DateTimeField(required=False, allow_null=True)

class ClientServiceNotesSerializer(serializers.Serializer):
    notas = serializers.CharField(max_length=500, allow_blank=True, required=True,
                                  error_messages={'required': _("El campo 'notas' es obligatorio.")})
