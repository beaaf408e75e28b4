# api/serializers/base.py
"""
Contiene serializers base o comunes usados en múltiples módulos.
"""
import logging
from rest_framework import serializers
from django.contrib.auth import get_user_model

# Importar modelos necesarios para estos serializers base
from ..models import Salesperson, Service, Technician, Tenant

logger = logging.getLogger(__name__)
User = get_user_model()

class TenantBasicSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tenant
        fields = ['id', 'name', 'domain', 'plan', 'status']
        read_only_fields = fields

class BasicUserSerializer(serializers.ModelSerializer):
    """
    Serializer básico del usuario con su rol y tenant (si tiene membresía activa).
    """
    full_name = serializers.SerializerMethodField(read_only=True)
    role = serializers.SerializerMethodField(read_only=True)
    tenant = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'first_name', 'last_name', 'full_name',
            'is_active', 'is_staff', 'role', 'tenant',
        ]

    def get_full_name(self, obj):
        name = obj.get_full_name()
        return name if name else obj.username

    def get_role(self, obj):
        membership = obj.tenant_membership
        return membership.role if membership else None

    def get_tenant(self, obj):
        membership = obj.tenant_membership
        if membership is None:
            return None
        return TenantBasicSerializer(membership.tenant).data

class SalespersonBasicSerializer(serializers.ModelSerializer):
    """ Info mínima de vendedor para anidar. """
    class Meta:
        model = Salesperson
        fields = ['id', 'nombre', 'email']
        read_only_fields = fields

class TechnicianBasicSerializer(serializers.ModelSerializer):
    class Meta:
        model = Technician
        fields = ['id', 'nombre', 'email']
        read_only_fields = fields

class ServiceBasicSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = ['id', 'nombre', 'categoria']
        read_only_fields = fields
