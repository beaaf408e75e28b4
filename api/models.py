# api/models.py

import logging
from decimal import Decimal

from crum import get_current_user
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from .plans import PLAN_CHOICES, FREE, get_plan_limits
from .roles import Roles

# Configurar logger para este módulo
logger = logging.getLogger(__name__)

ESTADO_CHOICES = [('active', _('Activo')), ('inactive', _('Inactivo'))]

OBJECTIVE_STATUS_CHOICES = [
    ('pendiente', _('Pendiente')),
    ('en_progreso', _('En progreso')),
    ('completado', _('Completado')),
    ('no_completado', _('No completado')),
]

RATING_VALIDATORS = [MinValueValidator(1), MaxValueValidator(6)]
WEIGHT_VALIDATORS = [MinValueValidator(0), MaxValueValidator(100)]


def rating_field(label):
    return models.PositiveSmallIntegerField(label, null=True, blank=True, validators=RATING_VALIDATORS)


def validate_objective_dates(due_date, completion_date):
    """ La fecha de finalización no puede ser anterior a la fecha límite. """
    if due_date and completion_date and completion_date < due_date:
        raise ValidationError({'completion_date': _('La fecha de finalización no puede ser anterior a la fecha límite.')})

# ==============================================================================
# ---------------------- MODELOS DE TENANTS Y MIEMBROS ------------------------
# ==============================================================================

class Tenant(models.Model):
    """Organización cliente de la plataforma, con su plan y límites."""
    STATUS_CHOICES = [('active', _('Activo')), ('suspended', _('Suspendido')), ('cancelled', _('Cancelado'))]

    name = models.CharField(_("Nombre"), max_length=255)
    domain = models.CharField(_("Dominio"), max_length=255, unique=True)
    plan = models.CharField(_("Plan"), max_length=20, choices=PLAN_CHOICES, default=FREE)
    max_users = models.PositiveIntegerField(_("Máx. Usuarios"), null=True, blank=True)
    max_clients = models.PositiveIntegerField(_("Máx. Clientes"), null=True, blank=True)
    max_objectives = models.PositiveIntegerField(_("Máx. Objetivos"), null=True, blank=True)
    features = models.JSONField(_("Funcionalidades"), default=dict, blank=True)
    settings = models.JSONField(_("Configuración"), default=dict, blank=True)
    status = models.CharField(_("Estado"), max_length=20, choices=STATUS_CHOICES, default='active', db_index=True)
    created_at = models.DateTimeField(_("Fecha de Creación"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Última Actualización"), auto_now=True)

    class Meta:
        verbose_name = _("Tenant")
        verbose_name_plural = _("Tenants")
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.plan})"

    def apply_plan_defaults(self, force=False):
        """ Rellena límites y funcionalidades desde el plan (o los sobrescribe si force=True). """
        limits = get_plan_limits(self.plan)
        for field in ('max_users', 'max_clients', 'max_objectives'):
            if force or getattr(self, field) is None:
                setattr(self, field, limits[field])
        if force or not self.features:
            self.features = limits['features']

    def save(self, *args, **kwargs):
        self.apply_plan_defaults()
        super().save(*args, **kwargs)

    def has_feature(self, feature):
        return bool((self.features or {}).get(feature))


class TenantUser(models.Model):
    """Vincula un usuario con un tenant, con su rol y estado de membresía."""
    STATUS_CHOICES = [('active', _('Activo')), ('invited', _('Invitado')), ('suspended', _('Suspendido'))]

    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='members', verbose_name=_("Tenant"))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True,
        related_name='tenant_memberships', verbose_name=_("Usuario")
    )
    email = models.EmailField(_("Email"))
    role = models.CharField(_("Rol"), max_length=20, choices=Roles.choices(), default=Roles.USER)
    status = models.CharField(_("Estado"), max_length=20, choices=STATUS_CHOICES, default='invited', db_index=True)
    invited_at = models.DateTimeField(_("Invitado el"), default=timezone.now)
    joined_at = models.DateTimeField(_("Se unió el"), null=True, blank=True)

    class Meta:
        unique_together = ('tenant', 'email')
        verbose_name = _("Miembro de Tenant")
        verbose_name_plural = _("Miembros de Tenant")
        ordering = ['tenant__name', 'email']

    def __str__(self):
        return f"{self.email} @ {self.tenant.name} ({self.role}, {self.status})"

# ==============================================================================
# ----------------- MODELOS DE EQUIPO COMERCIAL Y TÉCNICO ---------------------
# ==============================================================================

class Salesperson(models.Model):
    """Vendedor responsable de una cartera de clientes."""
    nombre = models.CharField(_("Nombre"), max_length=100)
    email = models.EmailField(_("Email"), unique=True)
    estado = models.CharField(_("Estado"), max_length=10, choices=ESTADO_CHOICES, default='active', db_index=True)
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, null=True, blank=True, related_name='salespersons', verbose_name=_("Tenant"))
    created_at = models.DateTimeField(_("Fecha de Creación"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Última Actualización"), auto_now=True)

    class Meta:
        verbose_name = _("Vendedor")
        verbose_name_plural = _("Vendedores")
        ordering = ['nombre']

    def __str__(self):
        return f"{self.nombre} ({self.email})"


class Technician(models.Model):
    """Técnico asignado al soporte de clientes."""
    nombre = models.CharField(_("Nombre"), max_length=100)
    email = models.EmailField(_("Email"), unique=True, null=True, blank=True)
    telefono = models.CharField(_("Teléfono"), max_length=20, blank=True, null=True)
    especialidad = models.CharField(_("Especialidad"), max_length=100, blank=True, null=True)
    estado = models.CharField(_("Estado"), max_length=10, choices=ESTADO_CHOICES, default='active', db_index=True)
    notas = models.TextField(_("Notas"), blank=True, null=True)
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, null=True, blank=True, related_name='technicians', verbose_name=_("Tenant"))
    created_at = models.DateTimeField(_("Fecha de Creación"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Última Actualización"), auto_now=True)

    class Meta:
        verbose_name = _("Técnico")
        verbose_name_plural = _("Técnicos")
        ordering = ['nombre']

    def __str__(self):
        return self.nombre

# ==============================================================================
# ------------------ MODELOS DE CLIENTES Y SERVICIOS --------------------------
# ==============================================================================

class Service(models.Model):
    """Servicio del catálogo que puede asignarse a clientes."""
    nombre = models.CharField(_("Nombre"), max_length=150, unique=True)
    categoria = models.CharField(_("Categoría"), max_length=100)
    descripcion = models.TextField(_("Descripción"), blank=True, null=True)
    created_at = models.DateTimeField(_("Fecha de Creación"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Última Actualización"), auto_now=True)

    class Meta:
        verbose_name = _("Servicio")
        verbose_name_plural = _("Servicios")
        ordering = ['categoria', 'nombre']

    def __str__(self):
        return f"{self.nombre} [{self.categoria}]"


class Client(models.Model):
    """Cliente con su vendedor, técnico y servicios contratados."""
    nombre = models.CharField(_("Nombre"), max_length=100)
    email = models.EmailField(_("Email"), blank=True, null=True)
    telefono = models.CharField(_("Teléfono"), max_length=20, blank=True, null=True)
    direccion = models.CharField(_("Dirección"), max_length=200, blank=True, null=True)
    contrato_soporte = models.BooleanField(_("Contrato de Soporte"), default=False)
    fecha_ultimo_relevamiento = models.DateField(_("Fecha Último Relevamiento"), null=True, blank=True)
    link_documento_relevamiento = models.URLField(_("Documento de Relevamiento"), max_length=500, null=True, blank=True)
    acciones_pendientes = models.JSONField(_("Acciones Pendientes"), default=list, blank=True)
    notas = models.TextField(_("Notas"), max_length=1000, blank=True, null=True)
    vendedor = models.ForeignKey(
        Salesperson, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='clients', verbose_name=_("Vendedor")
    )
    tecnico = models.ForeignKey(
        Technician, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='clients', verbose_name=_("Técnico")
    )
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, null=True, blank=True, related_name='clients', verbose_name=_("Tenant"))
    servicios = models.ManyToManyField(
        Service, through='ClientService', related_name='clients', blank=True, verbose_name=_("Servicios")
    )
    created_at = models.DateTimeField(_("Fecha de Creación"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Última Actualización"), auto_now=True)

    class Meta:
        verbose_name = _("Cliente")
        verbose_name_plural = _("Clientes")
        ordering = ['nombre']

    def __str__(self):
        return self.nombre

    def clean(self):
        if not (self.nombre or '').strip():
            raise ValidationError({'nombre': _('El nombre del cliente es obligatorio.')})


class ClientService(models.Model):
    """
    Asociación cliente-servicio. La unicidad del par (client, servicio) la garantiza
    ClientServiceManager; los duplicados heredados los elimina el health check.
    """
    client = models.ForeignKey(Client, on_delete=models.CASCADE, related_name='service_links', verbose_name=_("Cliente"))
    servicio = models.ForeignKey(Service, on_delete=models.CASCADE, related_name='client_links', verbose_name=_("Servicio"))
    fecha_asignacion = models.DateTimeField(_("Fecha de Asignación"), null=True, blank=True, default=timezone.now)
    notas = models.CharField(_("Notas"), max_length=500, null=True, blank=True, default='')
    detalles = models.JSONField(_("Detalles"), default=dict, blank=True)
    created_at = models.DateTimeField(_("Fecha de Creación"), default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(_("Última Actualización"), auto_now=True)

    class Meta:
        verbose_name = _("Servicio de Cliente")
        verbose_name_plural = _("Servicios de Clientes")
        ordering = ['-fecha_asignacion']
        indexes = [models.Index(fields=['client', 'servicio'], name='clientservice_pair_idx')]

    def __str__(self):
        return f"{self.client_id} -> {self.servicio_id}"

# ==============================================================================
# -------------------- EVALUACIONES Y OBJETIVOS DE TÉCNICOS -------------------
# ==============================================================================

class TechnicianEvaluation(models.Model):
    """Evaluación semestral de un técnico (19 valoraciones de 1 a 6)."""
    SEMESTER_CHOICES = [('H1', _('Primer semestre')), ('H2', _('Segundo semestre'))]
    STATUS_CHOICES = [('draft', _('Borrador')), ('final', _('Final'))]

    technician = models.ForeignKey(Technician, on_delete=models.CASCADE, related_name='evaluations', verbose_name=_("Técnico"))
    year = models.PositiveSmallIntegerField(_("Año"), validators=[MinValueValidator(2000), MaxValueValidator(2100)])
    semester = models.CharField(_("Semestre"), max_length=2, choices=SEMESTER_CHOICES)
    status = models.CharField(_("Estado"), max_length=10, choices=STATUS_CHOICES, default='draft')

    # Calidad
    quality_accuracy = rating_field(_("Precisión"))
    quality_output_quantity = rating_field(_("Cantidad de trabajo"))
    quality_organization = rating_field(_("Organización"))
    quality_use_of_tools = rating_field(_("Uso de herramientas"))
    # Conocimiento
    knowledge_technical_skill = rating_field(_("Habilidad técnica"))
    knowledge_methods = rating_field(_("Métodos"))
    knowledge_tools = rating_field(_("Herramientas"))
    knowledge_autonomy = rating_field(_("Autonomía"))
    knowledge_training = rating_field(_("Formación"))
    # Compromiso
    commitment_collaboration = rating_field(_("Colaboración"))
    commitment_communication = rating_field(_("Comunicación"))
    commitment_proactivity = rating_field(_("Proactividad"))
    commitment_punctuality = rating_field(_("Puntualidad"))
    commitment_motivation = rating_field(_("Motivación"))
    # Actitud
    attitude_openness = rating_field(_("Apertura"))
    attitude_adaptability = rating_field(_("Adaptabilidad"))
    attitude_improvement = rating_field(_("Mejora continua"))
    # Valores
    values_honesty = rating_field(_("Honestidad"))
    values_responsibility = rating_field(_("Responsabilidad"))

    overall_rating = models.PositiveSmallIntegerField(_("Valoración Global"), null=True, blank=True)
    supervisor_comments = models.TextField(_("Comentarios del Supervisor"), max_length=2000, blank=True, null=True)
    employee_comments = models.TextField(_("Comentarios del Empleado"), max_length=2000, blank=True, null=True)
    previous_objectives = models.JSONField(_("Objetivos Anteriores"), default=list, blank=True)
    next_objectives = models.JSONField(_("Próximos Objetivos"), default=list, blank=True)
    bonus_percentage = models.DecimalField(
        _("Porcentaje de Bono"), max_digits=5, decimal_places=2, default=Decimal('0.00'),
        validators=WEIGHT_VALIDATORS
    )
    created_at = models.DateTimeField(_("Fecha de Creación"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Última Actualización"), auto_now=True)

    class Meta:
        unique_together = ('technician', 'year', 'semester')
        verbose_name = _("Evaluación de Técnico")
        verbose_name_plural = _("Evaluaciones de Técnicos")
        ordering = ['-year', '-semester']

    def __str__(self):
        return f"{self.technician} - {self.year} {self.semester} ({self.status})"

    @property
    def is_final(self):
        return self.status == 'final'


class TechnicianObjective(models.Model):
    """Objetivo individual de un técnico (periodo anterior o siguiente)."""
    PRIORITY_CHOICES = [('low', _('Baja')), ('medium', _('Media')), ('high', _('Alta'))]

    technician = models.ForeignKey(Technician, on_delete=models.CASCADE, related_name='objectives', verbose_name=_("Técnico"))
    text = models.TextField(_("Objetivo"))
    description = models.TextField(_("Descripción"), blank=True, null=True)
    criteria = models.TextField(_("Criterios de Éxito"), blank=True, null=True)
    status = models.CharField(_("Estado"), max_length=20, choices=OBJECTIVE_STATUS_CHOICES, default='pendiente')
    due_date = models.DateField(_("Fecha Límite"), null=True, blank=True)
    completion_date = models.DateField(_("Fecha de Finalización"), null=True, blank=True)
    completed = models.BooleanField(_("Completado"), default=False)
    priority = models.CharField(_("Prioridad"), max_length=10, choices=PRIORITY_CHOICES, default='medium')
    weight = models.DecimalField(_("Peso"), max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=WEIGHT_VALIDATORS)
    evidence = models.URLField(_("Evidencia"), max_length=500, blank=True, null=True)
    is_next_objective = models.BooleanField(_("Objetivo del Próximo Periodo"), default=True)
    is_global = models.BooleanField(_("Global"), default=False)
    created_at = models.DateTimeField(_("Fecha de Creación"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Última Actualización"), auto_now=True)

    class Meta:
        verbose_name = _("Objetivo de Técnico")
        verbose_name_plural = _("Objetivos de Técnicos")
        ordering = ['due_date', 'created_at']

    def __str__(self):
        return f"{self.technician}: {self.text[:50]}"

    def clean(self):
        validate_objective_dates(self.due_date, self.completion_date)

# ==============================================================================
# ------------------- OBJETIVOS CUANTITATIVOS Y CUALITATIVOS ------------------
# ==============================================================================

class QuantitativeObjectiveTemplate(models.Model):
    """Plantilla reutilizable para objetivos cuantitativos."""
    TYPE_CHOICES = [('moneda', _('Moneda')), ('cantidad', _('Cantidad'))]

    name = models.CharField(_("Nombre"), max_length=150)
    description = models.TextField(_("Descripción"), blank=True, null=True)
    type = models.CharField(_("Tipo"), max_length=10, choices=TYPE_CHOICES, default='moneda')
    annual = models.DecimalField(_("Objetivo Anual"), max_digits=14, decimal_places=2, default=Decimal('0.00'))
    monthly = models.DecimalField(_("Objetivo Mensual"), max_digits=14, decimal_places=2, default=Decimal('0.00'))
    minimum = models.DecimalField(_("Mínimo"), max_digits=14, decimal_places=2, default=Decimal('0.00'))
    weight = models.DecimalField(_("Peso"), max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=WEIGHT_VALIDATORS)
    created_at = models.DateTimeField(_("Fecha de Creación"), auto_now_add=True)

    class Meta:
        verbose_name = _("Plantilla de Objetivo Cuantitativo")
        verbose_name_plural = _("Plantillas de Objetivos Cuantitativos")
        ordering = ['name']

    def __str__(self):
        return self.name


class QuantitativeObjective(models.Model):
    """Objetivo numérico de empresa que se reparte entre vendedores."""
    TYPE_CHOICES = [('currency', _('Moneda')), ('percentage', _('Porcentaje')), ('number', _('Número'))]
    STATUS_CHOICES = [
        ('pending', _('Pendiente')), ('in_progress', _('En progreso')),
        ('completed', _('Completado')), ('not_completed', _('No completado')),
    ]

    name = models.CharField(_("Nombre"), max_length=150)
    description = models.TextField(_("Descripción"), blank=True, null=True)
    type = models.CharField(_("Tipo"), max_length=12, choices=TYPE_CHOICES, default='currency')
    company_target = models.DecimalField(_("Objetivo de Empresa"), max_digits=14, decimal_places=2, validators=[MinValueValidator(0)])
    minimum_acceptable = models.DecimalField(
        _("Mínimo Aceptable"), max_digits=14, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )
    weight = models.DecimalField(_("Peso"), max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=WEIGHT_VALIDATORS)
    start_date = models.DateField(_("Fecha de Inicio"))
    end_date = models.DateField(_("Fecha de Fin"))
    status = models.CharField(_("Estado"), max_length=15, choices=STATUS_CHOICES, default='pending')
    is_global = models.BooleanField(_("Global"), default=False)
    template = models.ForeignKey(
        QuantitativeObjectiveTemplate, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='objectives', verbose_name=_("Plantilla")
    )
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, null=True, blank=True, related_name='quantitative_objectives', verbose_name=_("Tenant"))
    salespersons = models.ManyToManyField(
        Salesperson, through='SalespersonQuantitativeObjective', related_name='quantitative_objectives', blank=True
    )
    created_at = models.DateTimeField(_("Fecha de Creación"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Última Actualización"), auto_now=True)

    class Meta:
        verbose_name = _("Objetivo Cuantitativo")
        verbose_name_plural = _("Objetivos Cuantitativos")
        ordering = ['-start_date', 'name']

    def __str__(self):
        return f"{self.name} ({self.company_target})"

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({'end_date': _('La fecha de fin debe ser posterior a la fecha de inicio.')})

    @property
    def assigned_total(self):
        total = self.assignments.aggregate(total=models.Sum('individual_target'))['total']
        return total or Decimal('0.00')

    @property
    def difference(self):
        """ Objetivo de empresa menos la suma de objetivos individuales (informativo). """
        return self.company_target - self.assigned_total


class SalespersonQuantitativeObjective(models.Model):
    """Objetivo cuantitativo asignado a un vendedor, con su progreso mensual."""
    salesperson = models.ForeignKey(Salesperson, on_delete=models.CASCADE, related_name='quantitative_assignments', verbose_name=_("Vendedor"))
    objective = models.ForeignKey(QuantitativeObjective, on_delete=models.CASCADE, related_name='assignments', verbose_name=_("Objetivo"))
    individual_target = models.DecimalField(
        _("Objetivo Individual"), max_digits=14, decimal_places=2, default=Decimal('0.00'), validators=[MinValueValidator(0)]
    )
    monthly_progress = models.JSONField(_("Progreso Mensual"), default=dict, blank=True)
    current_value = models.DecimalField(_("Valor Actual"), max_digits=14, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(_("Estado"), max_length=15, choices=QuantitativeObjective.STATUS_CHOICES, default='pending')
    created_at = models.DateTimeField(_("Fecha de Creación"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Última Actualización"), auto_now=True)

    class Meta:
        unique_together = ('salesperson', 'objective')
        verbose_name = _("Asignación de Objetivo Cuantitativo")
        verbose_name_plural = _("Asignaciones de Objetivos Cuantitativos")

    def __str__(self):
        return f"{self.salesperson} - {self.objective.name}: {self.current_value}/{self.individual_target}"

    def recalculate_current_value(self):
        """ current_value = suma de los valores mensuales ('01'..'12'). """
        total = Decimal('0.00')
        for value in (self.monthly_progress or {}).values():
            if value is not None:
                total += Decimal(str(value))
        self.current_value = total
        return total

    def refresh_status(self, today=None):
        """ Estado según el valor acumulado frente al objetivo individual y al mínimo aceptable. """
        today = today or timezone.localdate()
        status = 'pending'
        if self.current_value > 0:
            status = 'in_progress'
            objective = self.objective
            if self.current_value >= self.individual_target:
                status = 'completed'
            elif (objective.minimum_acceptable is not None and today > objective.end_date
                  and self.current_value < objective.minimum_acceptable):
                status = 'not_completed'
        self.status = status
        return status


class QualitativeObjective(models.Model):
    """Objetivo cualitativo asignable a uno o varios vendedores."""
    name = models.CharField(_("Nombre"), max_length=150)
    description = models.TextField(_("Descripción"), blank=True, null=True)
    criteria = models.TextField(_("Criterios"), blank=True, null=True)
    status = models.CharField(_("Estado"), max_length=20, choices=OBJECTIVE_STATUS_CHOICES, default='pendiente', db_index=True)
    due_date = models.DateField(_("Fecha Límite"), null=True, blank=True)
    completion_date = models.DateField(_("Fecha de Finalización"), null=True, blank=True)
    weight = models.DecimalField(_("Peso"), max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=WEIGHT_VALIDATORS)
    comments = models.TextField(_("Comentarios"), blank=True, null=True)
    evidence = models.TextField(_("Evidencia"), blank=True, null=True)
    is_global = models.BooleanField(_("Global"), default=False)
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, null=True, blank=True, related_name='qualitative_objectives', verbose_name=_("Tenant"))
    salespersons = models.ManyToManyField(
        Salesperson, through='SalespersonObjective', related_name='qualitative_objectives', blank=True
    )
    created_at = models.DateTimeField(_("Fecha de Creación"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Última Actualización"), auto_now=True)

    class Meta:
        verbose_name = _("Objetivo Cualitativo")
        verbose_name_plural = _("Objetivos Cualitativos")
        ordering = ['due_date', 'name']

    def __str__(self):
        return f"{self.name} ({self.get_status_display()})"

    def clean(self):
        validate_objective_dates(self.due_date, self.completion_date)


class SalespersonObjective(models.Model):
    salesperson = models.ForeignKey(Salesperson, on_delete=models.CASCADE, related_name='qualitative_assignments', verbose_name=_("Vendedor"))
    objective = models.ForeignKey(QualitativeObjective, on_delete=models.CASCADE, related_name='assignments', verbose_name=_("Objetivo"))
    assigned_at = models.DateTimeField(_("Asignado el"), auto_now_add=True)

    class Meta:
        unique_together = ('salesperson', 'objective')
        verbose_name = _("Asignación de Objetivo Cualitativo")
        verbose_name_plural = _("Asignaciones de Objetivos Cualitativos")

    def __str__(self):
        return f"{self.salesperson} - {self.objective.name}"

# ==============================================================================
# ------------------------------- AUDITORÍA -----------------------------------
# ==============================================================================

class AuditLog(models.Model):
    """Registro de auditoría de acciones importantes."""
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='audit_logs', verbose_name=_("Usuario")
    )
    action = models.CharField(
        _("Acción"), max_length=255, help_text=_("Descripción de la acción realizada")
    )
    timestamp = models.DateTimeField(_("Timestamp"), auto_now_add=True, db_index=True)
    details = models.JSONField(
        _("Detalles"), default=dict, blank=True, help_text=_("Detalles adicionales en formato JSON")
    )

    class Meta:
        ordering = ['-timestamp']
        verbose_name = _("Registro de Auditoría")
        verbose_name_plural = _("Registros de Auditoría")

    def __str__(self):
        user_str = self.user.username if self.user else _("Sistema")
        timestamp_str = self.timestamp.strftime('%Y-%m-%d %H:%M') if self.timestamp else 'N/A'
        return f"{timestamp_str} - {user_str}: {self.action}"

# ==============================================================================
# ---------------------- MÉTODOS AÑADIDOS AL MODELO USER ----------------------
# ==============================================================================

UserModel = get_user_model()

@property
def tenant_membership(self):
    """ Membresía activa del usuario en un tenant activo (con caché por instancia). """
    cache_key = '_tenant_membership_cache'
    if not hasattr(self, cache_key):
        membership = None
        if self.pk:
            membership = TenantUser.objects.select_related('tenant').filter(
                user_id=self.pk, status='active', tenant__status='active'
            ).first()
        setattr(self, cache_key, membership)
    return getattr(self, cache_key)

def has_role(self, role_name):
    if not role_name: return False
    membership = self.tenant_membership
    return bool(membership and membership.role == role_name)

def is_tenant_admin(self):
    return self.has_role(Roles.ADMIN)

UserModel.add_to_class("tenant_membership", tenant_membership)
UserModel.add_to_class("has_role", has_role)
UserModel.add_to_class("is_tenant_admin", is_tenant_admin)

# ==============================================================================
# ---------------------- SEÑALES DE LA APLICACIÓN -----------------------------
# ==============================================================================

# --- Señales de Auditoría ---
def log_action(instance, action_verb, details_dict=None):
    user = get_current_user(); model_name = instance.__class__.__name__
    if user is not None and not getattr(user, 'is_authenticated', False):
        user = None
    instance_str = str(instance)
    action_str = f"{model_name} {action_verb}: {instance_str}"[:255]
    log_details = {'model': model_name, 'pk': instance.pk if instance.pk else None, 'representation': instance_str}
    if details_dict: log_details.update(details_dict)
    AuditLog.objects.create(user=user, action=action_str, details=log_details)

AUDITED_MODELS = [
    Client, ClientService, Technician, TechnicianEvaluation, TechnicianObjective, Service,
    Salesperson, QuantitativeObjective, QualitativeObjective, Tenant, TenantUser,
]

@receiver(post_save)
def audit_log_save_signal(sender, instance, created, **kwargs):
    if sender in AUDITED_MODELS and not kwargs.get('raw'):
        action_verb = "Creado" if created else "Actualizado"; details = {}
        if hasattr(instance, 'status'): details['status'] = instance.status
        if isinstance(instance, ClientService): details['client'] = instance.client_id; details['servicio'] = instance.servicio_id
        log_action(instance, action_verb, details)

@receiver(post_delete)
def audit_log_delete_signal(sender, instance, **kwargs):
    if sender in AUDITED_MODELS: log_action(instance, "Eliminado")
