# api/serializers/utilities.py
"""
Serializers para utilidades como los Logs de Auditoría.
"""
from rest_framework import serializers

# Importar modelos necesarios
from ..models import AuditLog

class AuditLogSerializer(serializers.ModelSerializer):
    """ Serializer para MOSTRAR logs de auditoría. """
    username = serializers.CharField(source='user.username', read_only=True, allow_null=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'username', 'action', 'timestamp', 'details']
        read_only_fields = fields # Solo lectura
