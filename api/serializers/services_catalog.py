# api/serializers/services_catalog.py
"""
Serializers para el catálogo de servicios.
"""
from rest_framework import serializers
from django.utils.translation import gettext_lazy as _

# Importar modelos necesarios
from ..models import Service

class ServiceSerializer(serializers.ModelSerializer):
    """ Serializer para leer/escribir información de Servicios. """
    client_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Service
        fields = ['id', 'nombre', 'categoria', 'descripcion', 'client_count', 'created_at', 'updated_at']
        read_only_fields = ['id', 'client_count', 'created_at', 'updated_at']

    def validate_nombre(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError(_("El nombre del servicio es obligatorio."))
        return value

    def validate_categoria(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError(_("La categoría es obligatoria."))
        return value
