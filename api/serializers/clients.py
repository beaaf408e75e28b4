# api/serializers/clients.py
"""
Serializers para Clientes y la matriz cliente-servicio.
"""
import logging
from rest_framework import serializers
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from ..exceptions import Conflict
from ..models import Client, Salesperson, Technician
from .base import SalespersonBasicSerializer, ServiceBasicSerializer, TechnicianBasicSerializer

logger = logging.getLogger(__name__)

class ClientSerializer(serializers.ModelSerializer):
    """ Serializer para leer/escribir Clientes. Los FKs se escriben por ID. """
    vendedor = serializers.PrimaryKeyRelatedField(queryset=Salesperson.objects.all(), required=False, allow_null=True)
    tecnico = serializers.PrimaryKeyRelatedField(queryset=Technician.objects.all(), required=False, allow_null=True)
    vendedor_detail = SalespersonBasicSerializer(source='vendedor', read_only=True)
    tecnico_detail = TechnicianBasicSerializer(source='tecnico', read_only=True)
    servicios = ServiceBasicSerializer(many=True, read_only=True)

    class Meta:
        model = Client
        fields = [
            'id', 'nombre', 'email', 'telefono', 'direccion', 'contrato_soporte',
            'fecha_ultimo_relevamiento', 'link_documento_relevamiento', 'acciones_pendientes',
            'notas', 'vendedor', 'vendedor_detail', 'tecnico', 'tecnico_detail', 'servicios',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'vendedor_detail', 'tecnico_detail', 'servicios', 'created_at', 'updated_at']

    def validate_nombre(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError(_("El nombre del cliente es obligatorio."))
        return value

    def validate_acciones_pendientes(self, value):
        if value in (None, ''):
            return []
        if not isinstance(value, list):
            raise serializers.ValidationError(_("Debe ser una lista de acciones."))
        return value

    def validate(self, attrs):
        nombre = attrs.get('nombre', getattr(self.instance, 'nombre', None))
        vendedor = attrs['vendedor'] if 'vendedor' in attrs else getattr(self.instance, 'vendedor', None)
        duplicates = Client.objects.filter(nombre__iexact=nombre, vendedor=vendedor)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise Conflict(_("Ya existe un cliente con ese nombre para el mismo vendedor."))
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        client = super().create(validated_data)
        logger.info(f"[ClientSerializer] Cliente {client.pk} '{client.nombre}' creado.")
        return client


class ClientMatrixSerializer(serializers.ModelSerializer):
    """ Fila de la matriz: cliente con los IDs de sus servicios asignados. """
    vendedor = SalespersonBasicSerializer(read_only=True)
    tecnico = TechnicianBasicSerializer(read_only=True)
    servicios = serializers.SerializerMethodField()

    class Meta:
        model = Client
        fields = ['id', 'nombre', 'contrato_soporte', 'vendedor', 'tecnico', 'servicios']
        read_only_fields = fields

    def get_servicios(self, obj):
        # Con prefetch de service_links no hay consulta extra por fila
        return sorted({link.servicio_id for link in obj.service_links.all()})
