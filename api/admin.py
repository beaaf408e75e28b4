# api/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _

from .models import (
    AuditLog, Client, ClientService, QualitativeObjective, QuantitativeObjective,
    QuantitativeObjectiveTemplate, Salesperson, SalespersonQuantitativeObjective, Service,
    Technician, TechnicianEvaluation, TechnicianObjective, Tenant, TenantUser,
)

# --- Tenants ---
class TenantUserInline(admin.TabularInline):
    model = TenantUser
    extra = 0
    fields = ('email', 'user', 'role', 'status', 'invited_at', 'joined_at')
    autocomplete_fields = ['user']

@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ('name', 'domain', 'plan', 'status', 'max_users', 'max_clients', 'max_objectives')
    list_filter = ('plan', 'status')
    search_fields = ('name', 'domain')
    readonly_fields = ('created_at', 'updated_at')
    inlines = [TenantUserInline]
    fieldsets = (
        (None, {'fields': ('name', 'domain', 'plan', 'status')}),
        (_('Límites'), {'fields': ('max_users', 'max_clients', 'max_objectives', 'features')}),
        (_('Metadata'), {'fields': ('settings', 'created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

# --- Miembros en el UserAdmin ---
class UserTenantMembershipInline(admin.TabularInline):
    model = TenantUser
    extra = 0
    fk_name = 'user'
    fields = ('tenant', 'email', 'role', 'status')
    verbose_name = _("Membresía de Tenant")
    verbose_name_plural = _("Membresías de Tenant")

UserModel = get_user_model()

admin.site.unregister(UserModel)

@admin.register(UserModel)
class UserAdminWithTenants(BaseUserAdmin):
    inlines = [UserTenantMembershipInline] + list(BaseUserAdmin.inlines)

# --- Clientes y servicios ---
class ClientServiceInline(admin.TabularInline):
    model = ClientService
    extra = 0
    fields = ('servicio', 'fecha_asignacion', 'notas')
    autocomplete_fields = ['servicio']

@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'vendedor', 'tecnico', 'contrato_soporte', 'tenant')
    list_filter = ('contrato_soporte', 'tenant')
    search_fields = ('nombre', 'email')
    autocomplete_fields = ['vendedor', 'tecnico']
    inlines = [ClientServiceInline]

@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'categoria')
    list_filter = ('categoria',)
    search_fields = ('nombre', 'categoria')

@admin.register(ClientService)
class ClientServiceAdmin(admin.ModelAdmin):
    list_display = ('client', 'servicio', 'fecha_asignacion', 'created_at')
    search_fields = ('client__nombre', 'servicio__nombre')
    date_hierarchy = 'created_at'

# --- Equipo ---
@admin.register(Salesperson)
class SalespersonAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'email', 'estado')
    list_filter = ('estado',)
    search_fields = ('nombre', 'email')

class TechnicianObjectiveInline(admin.TabularInline):
    model = TechnicianObjective
    extra = 0
    fields = ('text', 'status', 'due_date', 'completed', 'priority', 'weight')

@admin.register(Technician)
class TechnicianAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'email', 'especialidad', 'estado')
    list_filter = ('estado', 'especialidad')
    search_fields = ('nombre', 'email')
    inlines = [TechnicianObjectiveInline]

@admin.register(TechnicianEvaluation)
class TechnicianEvaluationAdmin(admin.ModelAdmin):
    list_display = ('technician', 'year', 'semester', 'status', 'overall_rating', 'bonus_percentage')
    list_filter = ('year', 'semester', 'status')
    search_fields = ('technician__nombre',)
    readonly_fields = ('overall_rating', 'created_at', 'updated_at')

# --- Objetivos ---
class QuantitativeAssignmentInline(admin.TabularInline):
    model = SalespersonQuantitativeObjective
    extra = 0
    fields = ('salesperson', 'individual_target', 'current_value', 'status')
    readonly_fields = ('current_value',)

@admin.register(QuantitativeObjective)
class QuantitativeObjectiveAdmin(admin.ModelAdmin):
    list_display = ('name', 'type', 'company_target', 'start_date', 'end_date', 'status', 'is_global')
    list_filter = ('type', 'status', 'is_global')
    search_fields = ('name',)
    inlines = [QuantitativeAssignmentInline]

admin.site.register(QuantitativeObjectiveTemplate)

@admin.register(QualitativeObjective)
class QualitativeObjectiveAdmin(admin.ModelAdmin):
    list_display = ('name', 'status', 'due_date', 'weight', 'is_global')
    list_filter = ('status', 'is_global')
    search_fields = ('name',)

# --- Auditoría ---
@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ('timestamp', 'user', 'action')
    search_fields = ('action', 'user__username')
    readonly_fields = ('timestamp', 'user', 'action', 'details')
    date_hierarchy = 'timestamp'
