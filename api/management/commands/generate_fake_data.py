# -*- coding: utf-8 -*-
import random
from datetime import date
from decimal import Decimal

import faker
from django.core.management.base import BaseCommand
from django.db import transaction

from api.models import (
    Client, ClientService, QualitativeObjective, QuantitativeObjective, Salesperson,
    SalespersonObjective, SalespersonQuantitativeObjective, Service, Technician,
    TechnicianEvaluation, Tenant,
)
from api.services import EvaluationScoringService
from salesops_client.scoring import RATING_FIELDS

fake = faker.Faker('es_ES')

EXTRA_CATEGORIES = ['Infraestructura', 'Seguridad', 'Software', 'Soporte']
ESPECIALIDADES = ['Redes', 'Servidores', 'Ciberseguridad', 'Cloud', 'Puesto de trabajo']

class Command(BaseCommand):
    help = 'Genera datos falsos: vendedores, técnicos, clientes con servicios, objetivos y evaluaciones'

    def add_arguments(self, parser):
        parser.add_argument('--clientes', type=int, default=50)
        parser.add_argument('--vendedores', type=int, default=5)
        parser.add_argument('--tecnicos', type=int, default=6)
        parser.add_argument('--tenant', type=str, default=None, help='Dominio del tenant al que asignar los datos')
        parser.add_argument('--seed', type=int, default=None)

    def handle(self, *args, **options):
        if options['seed'] is not None:
            random.seed(options['seed'])
            fake.seed_instance(options['seed'])

        tenant = None
        if options['tenant']:
            tenant, _ = Tenant.objects.get_or_create(domain=options['tenant'], defaults={'name': options['tenant']})

        self.stdout.write("Iniciando generación de datos de ejemplo...")
        with transaction.atomic():
            vendedores = self.crear_vendedores(options['vendedores'], tenant)
            tecnicos = self.crear_tecnicos(options['tecnicos'], tenant)
            servicios = self.asegurar_servicios()
            self.crear_clientes(options['clientes'], vendedores, tecnicos, servicios, tenant)
            self.crear_objetivos(vendedores, tenant)
            self.crear_evaluaciones(tecnicos)
        self.stdout.write(self.style.SUCCESS("¡Datos de ejemplo generados exitosamente!"))

    def crear_vendedores(self, cantidad, tenant):
        vendedores = []
        for _ in range(cantidad):
            vendedores.append(Salesperson.objects.create(
                nombre=fake.name()[:100],
                email=fake.unique.email(),
                estado=random.choice(['active', 'active', 'active', 'inactive']),
                tenant=tenant,
            ))
        self.stdout.write(f"  Vendedores creados: {len(vendedores)}")
        return vendedores

    def crear_tecnicos(self, cantidad, tenant):
        tecnicos = []
        for _ in range(cantidad):
            tecnicos.append(Technician.objects.create(
                nombre=fake.name()[:100],
                email=fake.unique.email(),
                telefono=fake.phone_number()[:20],
                especialidad=random.choice(ESPECIALIDADES),
                tenant=tenant,
            ))
        self.stdout.write(f"  Técnicos creados: {len(tecnicos)}")
        return tecnicos

    def asegurar_servicios(self):
        """ Usa el catálogo existente y añade algunos servicios si está vacío. """
        if not Service.objects.exists():
            for categoria in EXTRA_CATEGORIES:
                for _ in range(3):
                    Service.objects.get_or_create(
                        nombre=f"{categoria} {fake.unique.word().capitalize()}",
                        defaults={'categoria': categoria, 'descripcion': fake.sentence()},
                    )
        return list(Service.objects.all())

    def crear_clientes(self, cantidad, vendedores, tecnicos, servicios, tenant):
        asociaciones = 0
        for _ in range(cantidad):
            cliente = Client.objects.create(
                nombre=fake.unique.company()[:100],
                email=fake.company_email(),
                telefono=fake.phone_number()[:20],
                direccion=fake.address().replace('\n', ', ')[:200],
                contrato_soporte=random.random() > 0.5,
                fecha_ultimo_relevamiento=fake.date_between(start_date='-1y', end_date='today'),
                vendedor=random.choice(vendedores) if vendedores else None,
                tecnico=random.choice(tecnicos) if tecnicos and random.random() > 0.2 else None,
                tenant=tenant,
            )
            for servicio in random.sample(servicios, k=random.randint(0, min(5, len(servicios)))):
                ClientService.objects.create(client=cliente, servicio=servicio, notas=fake.sentence()[:500])
                asociaciones += 1
        self.stdout.write(f"  Clientes creados: {cantidad} ({asociaciones} servicios asignados)")

    def crear_objetivos(self, vendedores, tenant):
        year = date.today().year
        activos = [v for v in vendedores if v.estado == 'active']
        objetivo = QuantitativeObjective.objects.create(
            name=f"Ventas {year}", type='currency',
            company_target=Decimal(random.randrange(100000, 500000, 1000)),
            minimum_acceptable=Decimal('50000'), weight=Decimal('60'),
            start_date=date(year, 1, 1), end_date=date(year, 12, 31),
            is_global=True, tenant=tenant,
        )
        for vendedor in activos:
            asignacion = SalespersonQuantitativeObjective(
                salesperson=vendedor, objective=objetivo,
                individual_target=(objetivo.company_target / len(activos)).quantize(Decimal('0.01')),
                monthly_progress={f"{m:02d}": random.randint(0, 20000) for m in range(1, date.today().month + 1)},
            )
            asignacion.recalculate_current_value()
            asignacion.refresh_status()
            asignacion.save()

        for _ in range(3):
            cualitativo = QualitativeObjective.objects.create(
                name=fake.catch_phrase()[:150],
                description=fake.paragraph(),
                status=random.choice(['pendiente', 'en_progreso', 'completado']),
                weight=Decimal(random.choice([10, 20, 30])),
                due_date=fake.date_between(start_date='today', end_date='+6m'),
                tenant=tenant,
            )
            for vendedor in random.sample(activos, k=min(2, len(activos))):
                SalespersonObjective.objects.create(salesperson=vendedor, objective=cualitativo)
        self.stdout.write(f"  Objetivos creados para {len(activos)} vendedores activos")

    def crear_evaluaciones(self, tecnicos):
        year = date.today().year - 1
        for tecnico in tecnicos:
            for semester in ('H1', 'H2'):
                ratings = {field: random.choice([None, 3, 4, 4, 5, 5, 6]) for field in RATING_FIELDS}
                derived = EvaluationScoringService.derived_fields(ratings)
                TechnicianEvaluation.objects.create(
                    technician=tecnico, year=year, semester=semester, status='final',
                    overall_rating=derived['overall_rating'],
                    bonus_percentage=derived['suggested_bonus_percentage'],
                    supervisor_comments=fake.paragraph(),
                    next_objectives=[fake.sentence() for _ in range(2)],
                    **ratings,
                )
        self.stdout.write(f"  Evaluaciones creadas: {len(tecnicos) * 2}")
