# api/migrations/0002_seed_service_catalog.py

from django.db import migrations

# --- CATÁLOGO BASE DE SERVICIOS ---
# (nombre, categoria, descripcion)
INITIAL_SERVICES = [
    ("Soporte Remoto", "Soporte", "Asistencia técnica remota en horario laboral."),
    ("Soporte Presencial", "Soporte", "Visitas técnicas programadas al cliente."),
    ("Mantenimiento Preventivo", "Soporte", "Revisión periódica de equipos y sistemas."),
    ("Licencias ERP", "Software", "Licenciamiento y actualizaciones del ERP."),
    ("Licencias Ofimática", "Software", None),
    ("Antivirus Gestionado", "Seguridad", "Consola centralizada y renovación anual."),
    ("Copias de Seguridad en la Nube", "Seguridad", None),
    ("Firewall Gestionado", "Seguridad", None),
    ("Cableado Estructurado", "Infraestructura", None),
    ("Servidores y Virtualización", "Infraestructura", None),
    ("Correo Corporativo", "Cloud", None),
    ("Hosting Web", "Cloud", None),
]


def seed_services(apps, schema_editor):
    """Crea el catálogo base de servicios (idempotente por nombre)."""
    db_alias = schema_editor.connection.alias
    Service = apps.get_model('api', 'Service')
    for nombre, categoria, descripcion in INITIAL_SERVICES:
        Service.objects.using(db_alias).get_or_create(
            nombre=nombre, defaults={'categoria': categoria, 'descripcion': descripcion}
        )


def remove_services(apps, schema_editor):
    """Elimina los servicios creados por esta migración (para revertir)."""
    db_alias = schema_editor.connection.alias
    Service = apps.get_model('api', 'Service')
    Service.objects.using(db_alias).filter(nombre__in=[s[0] for s in INITIAL_SERVICES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('api', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_services, remove_services),
    ]
