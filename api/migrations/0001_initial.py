from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


RATING_VALIDATORS = [django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(6)]
WEIGHT_VALIDATORS = [django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)]
OBJECTIVE_STATUS_CHOICES = [
    ('pendiente', 'Pendiente'), ('en_progreso', 'En progreso'),
    ('completado', 'Completado'), ('no_completado', 'No completado'),
]
QUANTITATIVE_STATUS_CHOICES = [
    ('pending', 'Pendiente'), ('in_progress', 'En progreso'),
    ('completed', 'Completado'), ('not_completed', 'No completado'),
]
ESTADO_CHOICES = [('active', 'Activo'), ('inactive', 'Inactivo')]


def rating(label):
    return models.PositiveSmallIntegerField(blank=True, null=True, validators=RATING_VALIDATORS, verbose_name=label)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Tenant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Nombre')),
                ('domain', models.CharField(max_length=255, unique=True, verbose_name='Dominio')),
                ('plan', models.CharField(choices=[('free', 'Free'), ('basic', 'Basic'), ('premium', 'Premium')], default='free', max_length=20, verbose_name='Plan')),
                ('max_users', models.PositiveIntegerField(blank=True, null=True, verbose_name='Máx. Usuarios')),
                ('max_clients', models.PositiveIntegerField(blank=True, null=True, verbose_name='Máx. Clientes')),
                ('max_objectives', models.PositiveIntegerField(blank=True, null=True, verbose_name='Máx. Objetivos')),
                ('features', models.JSONField(blank=True, default=dict, verbose_name='Funcionalidades')),
                ('settings', models.JSONField(blank=True, default=dict, verbose_name='Configuración')),
                ('status', models.CharField(choices=[('active', 'Activo'), ('suspended', 'Suspendido'), ('cancelled', 'Cancelado')], db_index=True, default='active', max_length=20, verbose_name='Estado')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Fecha de Creación')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Última Actualización')),
            ],
            options={
                'verbose_name': 'Tenant',
                'verbose_name_plural': 'Tenants',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='TenantUser',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('email', models.EmailField(max_length=254, verbose_name='Email')),
                ('role', models.CharField(choices=[('admin', 'Admin'), ('manager', 'Manager'), ('user', 'User')], default='user', max_length=20, verbose_name='Rol')),
                ('status', models.CharField(choices=[('active', 'Activo'), ('invited', 'Invitado'), ('suspended', 'Suspendido')], db_index=True, default='invited', max_length=20, verbose_name='Estado')),
                ('invited_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Invitado el')),
                ('joined_at', models.DateTimeField(blank=True, null=True, verbose_name='Se unió el')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='members', to='api.tenant', verbose_name='Tenant')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='tenant_memberships', to=settings.AUTH_USER_MODEL, verbose_name='Usuario')),
            ],
            options={
                'verbose_name': 'Miembro de Tenant',
                'verbose_name_plural': 'Miembros de Tenant',
                'ordering': ['tenant__name', 'email'],
                'unique_together': {('tenant', 'email')},
            },
        ),
        migrations.CreateModel(
            name='Salesperson',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=100, verbose_name='Nombre')),
                ('email', models.EmailField(max_length=254, unique=True, verbose_name='Email')),
                ('estado', models.CharField(choices=ESTADO_CHOICES, db_index=True, default='active', max_length=10, verbose_name='Estado')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Fecha de Creación')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Última Actualización')),
                ('tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='salespersons', to='api.tenant', verbose_name='Tenant')),
            ],
            options={
                'verbose_name': 'Vendedor',
                'verbose_name_plural': 'Vendedores',
                'ordering': ['nombre'],
            },
        ),
        migrations.CreateModel(
            name='Technician',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=100, verbose_name='Nombre')),
                ('email', models.EmailField(blank=True, max_length=254, null=True, unique=True, verbose_name='Email')),
                ('telefono', models.CharField(blank=True, max_length=20, null=True, verbose_name='Teléfono')),
                ('especialidad', models.CharField(blank=True, max_length=100, null=True, verbose_name='Especialidad')),
                ('estado', models.CharField(choices=ESTADO_CHOICES, db_index=True, default='active', max_length=10, verbose_name='Estado')),
                ('notas', models.TextField(blank=True, null=True, verbose_name='Notas')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Fecha de Creación')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Última Actualización')),
                ('tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='technicians', to='api.tenant', verbose_name='Tenant')),
            ],
            options={
                'verbose_name': 'Técnico',
                'verbose_name_plural': 'Técnicos',
                'ordering': ['nombre'],
            },
        ),
        migrations.CreateModel(
            name='Service',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=150, unique=True, verbose_name='Nombre')),
                ('categoria', models.CharField(max_length=100, verbose_name='Categoría')),
                ('descripcion', models.TextField(blank=True, null=True, verbose_name='Descripción')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Fecha de Creación')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Última Actualización')),
            ],
            options={
                'verbose_name': 'Servicio',
                'verbose_name_plural': 'Servicios',
                'ordering': ['categoria', 'nombre'],
            },
        ),
        migrations.CreateModel(
            name='Client',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=100, verbose_name='Nombre')),
                ('email', models.EmailField(blank=True, max_length=254, null=True, verbose_name='Email')),
                ('telefono', models.CharField(blank=True, max_length=20, null=True, verbose_name='Teléfono')),
                ('direccion', models.CharField(blank=True, max_length=200, null=True, verbose_name='Dirección')),
                ('contrato_soporte', models.BooleanField(default=False, verbose_name='Contrato de Soporte')),
                ('fecha_ultimo_relevamiento', models.DateField(blank=True, null=True, verbose_name='Fecha Último Relevamiento')),
                ('link_documento_relevamiento', models.URLField(blank=True, max_length=500, null=True, verbose_name='Documento de Relevamiento')),
                ('acciones_pendientes', models.JSONField(blank=True, default=list, verbose_name='Acciones Pendientes')),
                ('notas', models.TextField(blank=True, max_length=1000, null=True, verbose_name='Notas')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Fecha de Creación')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Última Actualización')),
                ('tecnico', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='clients', to='api.technician', verbose_name='Técnico')),
                ('tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='clients', to='api.tenant', verbose_name='Tenant')),
                ('vendedor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='clients', to='api.salesperson', verbose_name='Vendedor')),
            ],
            options={
                'verbose_name': 'Cliente',
                'verbose_name_plural': 'Clientes',
                'ordering': ['nombre'],
            },
        ),
        migrations.CreateModel(
            name='ClientService',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('fecha_asignacion', models.DateTimeField(blank=True, default=django.utils.timezone.now, null=True, verbose_name='Fecha de Asignación')),
                ('notas', models.CharField(blank=True, default='', max_length=500, null=True, verbose_name='Notas')),
                ('detalles', models.JSONField(blank=True, default=dict, verbose_name='Detalles')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Fecha de Creación')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Última Actualización')),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='service_links', to='api.client', verbose_name='Cliente')),
                ('servicio', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='client_links', to='api.service', verbose_name='Servicio')),
            ],
            options={
                'verbose_name': 'Servicio de Cliente',
                'verbose_name_plural': 'Servicios de Clientes',
                'ordering': ['-fecha_asignacion'],
                'indexes': [models.Index(fields=['client', 'servicio'], name='clientservice_pair_idx')],
            },
        ),
        migrations.AddField(
            model_name='client',
            name='servicios',
            field=models.ManyToManyField(blank=True, related_name='clients', through='api.ClientService', to='api.service', verbose_name='Servicios'),
        ),
        migrations.CreateModel(
            name='TechnicianEvaluation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('year', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(2000), django.core.validators.MaxValueValidator(2100)], verbose_name='Año')),
                ('semester', models.CharField(choices=[('H1', 'Primer semestre'), ('H2', 'Segundo semestre')], max_length=2, verbose_name='Semestre')),
                ('status', models.CharField(choices=[('draft', 'Borrador'), ('final', 'Final')], default='draft', max_length=10, verbose_name='Estado')),
                ('quality_accuracy', rating('Precisión')),
                ('quality_output_quantity', rating('Cantidad de trabajo')),
                ('quality_organization', rating('Organización')),
                ('quality_use_of_tools', rating('Uso de herramientas')),
                ('knowledge_technical_skill', rating('Habilidad técnica')),
                ('knowledge_methods', rating('Métodos')),
                ('knowledge_tools', rating('Herramientas')),
                ('knowledge_autonomy', rating('Autonomía')),
                ('knowledge_training', rating('Formación')),
                ('commitment_collaboration', rating('Colaboración')),
                ('commitment_communication', rating('Comunicación')),
                ('commitment_proactivity', rating('Proactividad')),
                ('commitment_punctuality', rating('Puntualidad')),
                ('commitment_motivation', rating('Motivación')),
                ('attitude_openness', rating('Apertura')),
                ('attitude_adaptability', rating('Adaptabilidad')),
                ('attitude_improvement', rating('Mejora continua')),
                ('values_honesty', rating('Honestidad')),
                ('values_responsibility', rating('Responsabilidad')),
                ('overall_rating', models.PositiveSmallIntegerField(blank=True, null=True, verbose_name='Valoración Global')),
                ('supervisor_comments', models.TextField(blank=True, max_length=2000, null=True, verbose_name='Comentarios del Supervisor')),
                ('employee_comments', models.TextField(blank=True, max_length=2000, null=True, verbose_name='Comentarios del Empleado')),
                ('previous_objectives', models.JSONField(blank=True, default=list, verbose_name='Objetivos Anteriores')),
                ('next_objectives', models.JSONField(blank=True, default=list, verbose_name='Próximos Objetivos')),
                ('bonus_percentage', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=5, validators=WEIGHT_VALIDATORS, verbose_name='Porcentaje de Bono')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Fecha de Creación')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Última Actualización')),
                ('technician', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='evaluations', to='api.technician', verbose_name='Técnico')),
            ],
            options={
                'verbose_name': 'Evaluación de Técnico',
                'verbose_name_plural': 'Evaluaciones de Técnicos',
                'ordering': ['-year', '-semester'],
                'unique_together': {('technician', 'year', 'semester')},
            },
        ),
        migrations.CreateModel(
            name='TechnicianObjective',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('text', models.TextField(verbose_name='Objetivo')),
                ('description', models.TextField(blank=True, null=True, verbose_name='Descripción')),
                ('criteria', models.TextField(blank=True, null=True, verbose_name='Criterios de Éxito')),
                ('status', models.CharField(choices=OBJECTIVE_STATUS_CHOICES, default='pendiente', max_length=20, verbose_name='Estado')),
                ('due_date', models.DateField(blank=True, null=True, verbose_name='Fecha Límite')),
                ('completion_date', models.DateField(blank=True, null=True, verbose_name='Fecha de Finalización')),
                ('completed', models.BooleanField(default=False, verbose_name='Completado')),
                ('priority', models.CharField(choices=[('low', 'Baja'), ('medium', 'Media'), ('high', 'Alta')], default='medium', max_length=10, verbose_name='Prioridad')),
                ('weight', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=5, validators=WEIGHT_VALIDATORS, verbose_name='Peso')),
                ('evidence', models.URLField(blank=True, max_length=500, null=True, verbose_name='Evidencia')),
                ('is_next_objective', models.BooleanField(default=True, verbose_name='Objetivo del Próximo Periodo')),
                ('is_global', models.BooleanField(default=False, verbose_name='Global')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Fecha de Creación')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Última Actualización')),
                ('technician', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='objectives', to='api.technician', verbose_name='Técnico')),
            ],
            options={
                'verbose_name': 'Objetivo de Técnico',
                'verbose_name_plural': 'Objetivos de Técnicos',
                'ordering': ['due_date', 'created_at'],
            },
        ),
        migrations.CreateModel(
            name='QuantitativeObjectiveTemplate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=150, verbose_name='Nombre')),
                ('description', models.TextField(blank=True, null=True, verbose_name='Descripción')),
                ('type', models.CharField(choices=[('moneda', 'Moneda'), ('cantidad', 'Cantidad')], default='moneda', max_length=10, verbose_name='Tipo')),
                ('annual', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14, verbose_name='Objetivo Anual')),
                ('monthly', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14, verbose_name='Objetivo Mensual')),
                ('minimum', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14, verbose_name='Mínimo')),
                ('weight', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=5, validators=WEIGHT_VALIDATORS, verbose_name='Peso')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Fecha de Creación')),
            ],
            options={
                'verbose_name': 'Plantilla de Objetivo Cuantitativo',
                'verbose_name_plural': 'Plantillas de Objetivos Cuantitativos',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='QuantitativeObjective',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=150, verbose_name='Nombre')),
                ('description', models.TextField(blank=True, null=True, verbose_name='Descripción')),
                ('type', models.CharField(choices=[('currency', 'Moneda'), ('percentage', 'Porcentaje'), ('number', 'Número')], default='currency', max_length=12, verbose_name='Tipo')),
                ('company_target', models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(0)], verbose_name='Objetivo de Empresa')),
                ('minimum_acceptable', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, validators=[django.core.validators.MinValueValidator(0)], verbose_name='Mínimo Aceptable')),
                ('weight', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=5, validators=WEIGHT_VALIDATORS, verbose_name='Peso')),
                ('start_date', models.DateField(verbose_name='Fecha de Inicio')),
                ('end_date', models.DateField(verbose_name='Fecha de Fin')),
                ('status', models.CharField(choices=QUANTITATIVE_STATUS_CHOICES, default='pending', max_length=15, verbose_name='Estado')),
                ('is_global', models.BooleanField(default=False, verbose_name='Global')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Fecha de Creación')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Última Actualización')),
                ('template', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='objectives', to='api.quantitativeobjectivetemplate', verbose_name='Plantilla')),
                ('tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='quantitative_objectives', to='api.tenant', verbose_name='Tenant')),
            ],
            options={
                'verbose_name': 'Objetivo Cuantitativo',
                'verbose_name_plural': 'Objetivos Cuantitativos',
                'ordering': ['-start_date', 'name'],
            },
        ),
        migrations.CreateModel(
            name='SalespersonQuantitativeObjective',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('individual_target', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14, validators=[django.core.validators.MinValueValidator(0)], verbose_name='Objetivo Individual')),
                ('monthly_progress', models.JSONField(blank=True, default=dict, verbose_name='Progreso Mensual')),
                ('current_value', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14, verbose_name='Valor Actual')),
                ('status', models.CharField(choices=QUANTITATIVE_STATUS_CHOICES, default='pending', max_length=15, verbose_name='Estado')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Fecha de Creación')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Última Actualización')),
                ('objective', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='api.quantitativeobjective', verbose_name='Objetivo')),
                ('salesperson', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='quantitative_assignments', to='api.salesperson', verbose_name='Vendedor')),
            ],
            options={
                'verbose_name': 'Asignación de Objetivo Cuantitativo',
                'verbose_name_plural': 'Asignaciones de Objetivos Cuantitativos',
                'unique_together': {('salesperson', 'objective')},
            },
        ),
        migrations.AddField(
            model_name='quantitativeobjective',
            name='salespersons',
            field=models.ManyToManyField(blank=True, related_name='quantitative_objectives', through='api.SalespersonQuantitativeObjective', to='api.salesperson'),
        ),
        migrations.CreateModel(
            name='QualitativeObjective',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=150, verbose_name='Nombre')),
                ('description', models.TextField(blank=True, null=True, verbose_name='Descripción')),
                ('criteria', models.TextField(blank=True, null=True, verbose_name='Criterios')),
                ('status', models.CharField(choices=OBJECTIVE_STATUS_CHOICES, db_index=True, default='pendiente', max_length=20, verbose_name='Estado')),
                ('due_date', models.DateField(blank=True, null=True, verbose_name='Fecha Límite')),
                ('completion_date', models.DateField(blank=True, null=True, verbose_name='Fecha de Finalización')),
                ('weight', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=5, validators=WEIGHT_VALIDATORS, verbose_name='Peso')),
                ('comments', models.TextField(blank=True, null=True, verbose_name='Comentarios')),
                ('evidence', models.TextField(blank=True, null=True, verbose_name='Evidencia')),
                ('is_global', models.BooleanField(default=False, verbose_name='Global')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Fecha de Creación')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Última Actualización')),
                ('tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='qualitative_objectives', to='api.tenant', verbose_name='Tenant')),
            ],
            options={
                'verbose_name': 'Objetivo Cualitativo',
                'verbose_name_plural': 'Objetivos Cualitativos',
                'ordering': ['due_date', 'name'],
            },
        ),
        migrations.CreateModel(
            name='SalespersonObjective',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('assigned_at', models.DateTimeField(auto_now_add=True, verbose_name='Asignado el')),
                ('objective', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='api.qualitativeobjective', verbose_name='Objetivo')),
                ('salesperson', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='qualitative_assignments', to='api.salesperson', verbose_name='Vendedor')),
            ],
            options={
                'verbose_name': 'Asignación de Objetivo Cualitativo',
                'verbose_name_plural': 'Asignaciones de Objetivos Cualitativos',
                'unique_together': {('salesperson', 'objective')},
            },
        ),
        migrations.AddField(
            model_name='qualitativeobjective',
            name='salespersons',
            field=models.ManyToManyField(blank=True, related_name='qualitative_objectives', through='api.SalespersonObjective', to='api.salesperson'),
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(help_text='Descripción de la acción realizada', max_length=255, verbose_name='Acción')),
                ('timestamp', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Timestamp')),
                ('details', models.JSONField(blank=True, default=dict, help_text='Detalles adicionales en formato JSON', verbose_name='Detalles')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL, verbose_name='Usuario')),
            ],
            options={
                'verbose_name': 'Registro de Auditoría',
                'verbose_name_plural': 'Registros de Auditoría',
                'ordering': ['-timestamp'],
            },
        ),
    ]
