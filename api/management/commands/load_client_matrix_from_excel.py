# api/management/commands/load_client_matrix_from_excel.py

import os

import pandas as pd
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from api.models import Client, Salesperson, Service, Technician
from api.services import ClientServiceManager

# Columnas fijas de la hoja; el resto se interpretan como servicios
BASE_COLUMNS = ['nombre', 'vendedor', 'tecnico', 'contrato_soporte', 'email', 'telefono', 'direccion', 'notas']
MARK_VALUES = {'x', 'si', 'sí', 'yes', 'y', '1', 'true'}

# --- Funciones auxiliares de limpieza ---
def clean_string(value, default=None):
    if value is None or pd.isna(value): return default
    val_str = str(value).strip()
    if val_str.endswith('.0'):
        try: return str(int(float(val_str)))
        except ValueError: pass
    return val_str if val_str and val_str.lower() != 'nan' else default

def is_marked(value):
    value = clean_string(value)
    return bool(value) and value.lower() in MARK_VALUES

def find_by_name_or_email(model, value):
    value = clean_string(value)
    if not value:
        return None
    return (model.objects.filter(email__iexact=value).first()
            or model.objects.filter(nombre__iexact=value).first())


class Command(BaseCommand):
    help = 'Carga la matriz cliente-servicio desde un archivo Excel (una fila por cliente, una columna por servicio).'

    def add_arguments(self, parser):
        parser.add_argument('excel_file', type=str, help='Ruta al archivo Excel (.xlsx).')
        parser.add_argument('--sheet', default=0, help='Nombre o índice de la hoja con la matriz')
        parser.add_argument('--categoria', default='Importado', help='Categoría para servicios nuevos')
        parser.add_argument('--create-services', action='store_true', help='Crea los servicios que no existan en el catálogo')

    @transaction.atomic
    def handle(self, *args, **options):
        file_path = options['excel_file']
        if not os.path.exists(file_path):
            raise CommandError(f"Archivo Excel no encontrado en: {file_path}")

        sheet = options['sheet']
        if isinstance(sheet, str) and sheet.isdigit():
            sheet = int(sheet)

        self.stdout.write(self.style.SUCCESS(f"Iniciando carga desde: {file_path}"))
        try:
            df = pd.read_excel(file_path, sheet_name=sheet, dtype=str)
        except ValueError as e:
            raise CommandError(f"Error leyendo archivo Excel: {e}. Hoja no encontrada ({sheet}).")
        df.columns = [str(column).strip() for column in df.columns]
        df = df.replace(['nan', 'NaN', 'None', ''], None)

        normalized = {column.lower(): column for column in df.columns}
        if 'nombre' not in normalized:
            raise CommandError("La hoja debe tener una columna 'nombre'.")
        service_columns = [column for column in df.columns if column.lower() not in BASE_COLUMNS]

        # --- 1. Resolver servicios ---
        services = {}
        for column in service_columns:
            service = Service.objects.filter(nombre__iexact=column).first()
            if service is None and options['create_services']:
                service = Service.objects.create(nombre=column, categoria=options['categoria'])
                self.stdout.write(f"  Servicio creado: {column}")
            if service is None:
                self.stdout.write(self.style.WARNING(f"  Columna '{column}' no corresponde a ningún servicio. Ignorada."))
                continue
            services[column] = service

        # --- 2. Clientes y asignaciones ---
        created_clients, assigned, already = 0, 0, 0
        for index, row in df.iterrows():
            nombre = clean_string(row.get(normalized['nombre']))
            if not nombre:
                self.stdout.write(self.style.ERROR(f"  Fila {index + 2}: sin nombre. Saltando."))
                continue
            vendedor = find_by_name_or_email(Salesperson, row.get(normalized.get('vendedor', ''), None))
            tecnico = find_by_name_or_email(Technician, row.get(normalized.get('tecnico', ''), None))
            defaults = {
                'tecnico': tecnico,
                'contrato_soporte': is_marked(row.get(normalized.get('contrato_soporte', ''), None)),
            }
            for field in ('email', 'telefono', 'direccion', 'notas'):
                if field in normalized:
                    defaults[field] = clean_string(row.get(normalized[field]))
            client, created = Client.objects.get_or_create(nombre=nombre, vendedor=vendedor, defaults=defaults)
            created_clients += int(created)

            for column, service in services.items():
                if not is_marked(row.get(column)):
                    continue
                _association, was_created = ClientServiceManager.assign(client, service)
                if was_created:
                    assigned += 1
                else:
                    already += 1

        self.stdout.write(self.style.SUCCESS(
            f"Carga completada. Clientes nuevos: {created_clients}, servicios asignados: {assigned}, ya asignados: {already}."
        ))
