# api/tenancy.py
"""
Contexto de tenant por petición y control de límites del plan.
"""
import logging

from rest_framework.permissions import BasePermission
from django.utils.translation import gettext_lazy as _

from .exceptions import PlanLimitReached
from .models import Client, QualitativeObjective, QuantitativeObjective, TenantUser
from .plans import get_plan_limits

logger = logging.getLogger(__name__)

LIMITED_RESOURCES = ('users', 'clients', 'objectives')


def get_request_membership(request):
    """ Membresía activa (TenantUser) del usuario autenticado, o None. """
    user = getattr(request, 'user', None)
    if not user or not user.is_authenticated:
        return None
    return user.tenant_membership


def get_request_tenant(request):
    membership = get_request_membership(request)
    return membership.tenant if membership else None


def count_resource(tenant, resource):
    if resource == 'users':
        return TenantUser.objects.filter(tenant=tenant, status='active').count()
    if resource == 'clients':
        return Client.objects.filter(tenant=tenant).count()
    if resource == 'objectives':
        return (QualitativeObjective.objects.filter(tenant=tenant).count()
                + QuantitativeObjective.objects.filter(tenant=tenant).count())
    raise ValueError(f"Tipo de recurso desconocido: {resource}")


def get_limit(tenant, resource):
    """ Límite efectivo: el valor del tenant, o el del plan si no está informado. """
    value = getattr(tenant, f"max_{resource}", None)
    if value is None:
        value = get_plan_limits(tenant.plan)[f"max_{resource}"]
    return value


def enforce_plan_limit(tenant, resource):
    """
    Lanza PlanLimitReached si el tenant ya alcanzó el máximo del recurso.
    Sin tenant (staff, tareas internas) no se aplica ningún límite.
    """
    if tenant is None:
        return
    current = count_resource(tenant, resource)
    limit = get_limit(tenant, resource)
    if current >= limit:
        logger.warning(f"[Tenancy] Límite alcanzado para '{resource}' en tenant {tenant.pk}: {current}/{limit}")
        raise PlanLimitReached(f"Plan limit reached for {resource}. Current: {current}, Limit: {limit}")


def plan_summary(tenant):
    return {
        'plan': tenant.plan,
        'limits': {resource: get_limit(tenant, resource) for resource in LIMITED_RESOURCES},
        'usage': {resource: count_resource(tenant, resource) for resource in LIMITED_RESOURCES},
        'features': tenant.features or get_plan_limits(tenant.plan)['features'],
    }


class HasPlanFeature(BasePermission):
    """
    Exige que el plan del tenant incluya `required_feature`.
    Los usuarios sin tenant (staff) no quedan restringidos por plan.
    """
    required_feature = None
    message = _("Esta funcionalidad no está disponible en tu plan actual.")

    def has_permission(self, request, view):
        feature = getattr(view, 'required_feature', None) or self.required_feature
        if not feature:
            return True
        tenant = get_request_tenant(request)
        if tenant is None:
            return True
        if not tenant.has_feature(feature):
            self.message = f"Feature '{feature}' is not available in your current plan"
            return False
        return True


class TenantScopedMixin:
    """
    Mixin para ViewSets: limita el queryset al tenant del usuario, asigna el tenant
    al crear y aplica el límite del plan indicado en `plan_limit_resource`.
    """
    tenant_field = 'tenant'
    plan_limit_resource = None

    def get_tenant_queryset(self):
        queryset = super().get_queryset()
        tenant = get_request_tenant(self.request)
        if tenant is not None:
            queryset = queryset.filter(**{self.tenant_field: tenant})
        return queryset

    def get_queryset(self):
        return self.get_tenant_queryset()

    def perform_create(self, serializer):
        tenant = get_request_tenant(self.request)
        if self.plan_limit_resource:
            enforce_plan_limit(tenant, self.plan_limit_resource)
        if tenant is not None:
            serializer.save(**{self.tenant_field: tenant})
        else:
            serializer.save()
