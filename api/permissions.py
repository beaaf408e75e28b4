# api/permissions.py
from rest_framework.permissions import BasePermission, IsAuthenticated, AllowAny
from django.utils.translation import gettext_lazy as _

from .roles import Roles

# ==============================================================================
# ------------------------- PERMISOS PERSONALIZADOS --------------------------
# ==============================================================================

class HasRolePermission(BasePermission):
    """
    Concede acceso al staff o a los miembros del tenant con alguno de `required_roles`.
    Los usuarios autenticados sin membresía de tenant se tratan como instalación
    de un solo tenant y conservan acceso si `allow_without_tenant` es True.
    """
    required_roles = []
    allow_without_tenant = True
    message = _("No tienes permiso para realizar esta acción debido a tu rol.")

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.user.is_staff:
            return True
        membership = request.user.tenant_membership
        if membership is None:
            return self.allow_without_tenant
        return any(request.user.has_role(role) for role in self.required_roles)

# --- Subclases específicas ---
class IsTenantAdmin(HasRolePermission):
    required_roles = [Roles.ADMIN]
    allow_without_tenant = False
    message = _("Necesitas ser administrador del tenant para esta acción.")

class CanManageDatabase(IsTenantAdmin):
    message = _("No tienes permiso para gestionar copias de seguridad.")

class CanManageTenantUsers(IsTenantAdmin):
    message = _("No tienes permiso para gestionar usuarios del tenant.")

class CanManageCatalog(HasRolePermission):
    required_roles = [Roles.ADMIN, Roles.MANAGER]
    message = _("No tienes permiso para gestionar el catálogo de servicios.")

class CanManageTeam(HasRolePermission):
    required_roles = [Roles.ADMIN, Roles.MANAGER]
    message = _("No tienes permiso para gestionar técnicos ni vendedores.")

class CanManageObjectives(HasRolePermission):
    required_roles = [Roles.ADMIN, Roles.MANAGER]
    message = _("No tienes permiso para gestionar objetivos.")

class CanViewAuditLogs(IsTenantAdmin):
    message = _("No tienes permiso para ver los registros de auditoría.")

