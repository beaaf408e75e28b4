# api/serializers/tenants.py
"""
Serializers para Tenants y sus miembros.
"""
import logging
from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _

from ..exceptions import Conflict
from ..models import Tenant, TenantUser
from ..roles import Roles
from ..tenancy import plan_summary

logger = logging.getLogger(__name__)
User = get_user_model()

class TenantSerializer(serializers.ModelSerializer):
    """ Tenant con sus límites; si no se informan se rellenan desde el plan. """
    class Meta:
        model = Tenant
        fields = [
            'id', 'name', 'domain', 'plan', 'max_users', 'max_clients', 'max_objectives',
            'features', 'settings', 'status', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def update(self, instance, validated_data):
        plan_changed = 'plan' in validated_data and validated_data['plan'] != instance.plan
        instance = super().update(instance, validated_data)
        if plan_changed:
            # Un cambio de plan resetea los límites salvo los enviados explícitamente
            explicit = {key: validated_data[key] for key in ('max_users', 'max_clients', 'max_objectives', 'features') if key in validated_data}
            instance.apply_plan_defaults(force=True)
            for key, value in explicit.items():
                setattr(instance, key, value)
            instance.save()
            logger.info(f"[TenantSerializer] Tenant {instance.pk} cambiado al plan '{instance.plan}'.")
        return instance

class TenantCurrentSerializer(serializers.ModelSerializer):
    """ Tenant actual con el rol del usuario y el resumen del plan. """
    role = serializers.SerializerMethodField()
    plan_details = serializers.SerializerMethodField()

    class Meta:
        model = Tenant
        fields = ['id', 'name', 'domain', 'plan', 'status', 'settings', 'role', 'plan_details']
        read_only_fields = ['id', 'domain', 'plan', 'status', 'role', 'plan_details']

    def get_role(self, obj):
        membership = self.context.get('membership')
        return membership.role if membership else None

    def get_plan_details(self, obj):
        return plan_summary(obj)

class TenantUserSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True, allow_null=True)

    class Meta:
        model = TenantUser
        fields = ['id', 'email', 'username', 'role', 'status', 'invited_at', 'joined_at']
        read_only_fields = fields

class TenantInviteSerializer(serializers.Serializer):
    email = serializers.EmailField()
    role = serializers.ChoiceField(choices=Roles.choices(), default=Roles.USER)

    def validate_email(self, value):
        tenant = self.context['tenant']
        if TenantUser.objects.filter(tenant=tenant, email__iexact=value).exists():
            raise Conflict(_("Este email ya pertenece o está invitado al tenant."))
        return value.lower()

    def create(self, validated_data):
        tenant = self.context['tenant']
        user = User.objects.filter(email__iexact=validated_data['email']).first()
        member = TenantUser.objects.create(tenant=tenant, user=user, status='invited', **validated_data)
        logger.info(f"[TenantInviteSerializer] {member.email} invitado al tenant {tenant.pk} como {member.role}.")
        return member
