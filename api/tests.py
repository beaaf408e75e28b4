import shutil
import tempfile
from datetime import date, timedelta
from decimal import Decimal

from django.contrib.auth.models import User
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from .backups import DatabaseBackupService, InvalidBackupName
from .models import (
    AuditLog, Client, ClientService, QuantitativeObjective, Salesperson,
    SalespersonQuantitativeObjective, Service, Technician, TechnicianEvaluation, Tenant, TenantUser,
)
from .services import (
    ClientServiceHealthService, ClientServiceManager, EvaluationScoringService,
    ObjectiveAssignmentService, SalespersonProgressService,
)
from .tenancy import enforce_plan_limit
from .exceptions import PlanLimitReached


class BaseAPITest(APITestCase):
    """ Usuario staff sin tenant: sin filtros de tenant ni límites de plan. """

    def setUp(self):
        self.user = User.objects.create_user(
            username=f'staff_{self._testMethodName}', password='testpassword', is_staff=True
        )
        self.client.force_authenticate(user=self.user)
        self.vendedor = Salesperson.objects.create(nombre='Ana Vendedora', email='ana@example.com')
        self.tecnico = Technician.objects.create(nombre='Luis Técnico', email='luis@example.com')
        self.cliente = Client.objects.create(nombre='Acme', vendedor=self.vendedor, tecnico=self.tecnico)
        self.servicio = Service.objects.create(nombre='Backup Test', categoria='Pruebas')
        self.otro_servicio = Service.objects.create(nombre='Firewall Test', categoria='Pruebas')

# ==============================================================================
# ------------------------ ASOCIACIONES CLIENTE-SERVICIO ----------------------
# ==============================================================================

class ClientServiceManagerTest(TestCase):
    def setUp(self):
        self.cliente = Client.objects.create(nombre='Acme')
        self.servicio = Service.objects.create(nombre='Backup Test', categoria='Pruebas')

    def test_assign_is_idempotent(self):
        first, created = ClientServiceManager.assign(self.cliente, self.servicio, notas='alta')
        second, created_again = ClientServiceManager.assign(self.cliente, self.servicio)
        self.assertTrue(created)
        self.assertFalse(created_again)
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(ClientService.objects.filter(client=self.cliente).count(), 1)

    def test_unassign_removes_duplicates(self):
        ClientService.objects.create(client=self.cliente, servicio=self.servicio)
        ClientService.objects.create(client=self.cliente, servicio=self.servicio)
        self.assertEqual(ClientServiceManager.unassign(self.cliente.pk, self.servicio.pk), 2)
        self.assertFalse(ClientService.objects.filter(client=self.cliente).exists())


class ClientServiceHealthTest(TestCase):
    def setUp(self):
        self.cliente = Client.objects.create(nombre='Acme')
        self.servicio = Service.objects.create(nombre='Backup Test', categoria='Pruebas')

    def test_fixes_incomplete_entries(self):
        association = ClientService.objects.create(
            client=self.cliente, servicio=self.servicio, fecha_asignacion=None, notas=None
        )
        report = ClientServiceHealthService.run()
        association.refresh_from_db()
        self.assertIn(f"Incomplete entry: {association.pk}", report['issues'])
        self.assertIn(f"Fixed incomplete entry: {association.pk}", report['fixed'])
        self.assertIsNotNone(association.fecha_asignacion)
        self.assertEqual(association.notas, '')

    def test_removes_duplicates_keeping_newest(self):
        older = ClientService.objects.create(client=self.cliente, servicio=self.servicio)
        newer = ClientService.objects.create(client=self.cliente, servicio=self.servicio)
        ClientService.objects.filter(pk=older.pk).update(created_at=newer.created_at - timedelta(days=1))

        report = ClientServiceHealthService.run()

        self.assertTrue(report['success'])
        self.assertIn(f"Duplicate entries for client {self.cliente.pk} and service {self.servicio.pk}: 2", report['issues'])
        self.assertEqual(report['fixed'], [f"Removed duplicate entry: {older.pk}"])
        self.assertEqual(list(ClientService.objects.values_list('pk', flat=True)), [newer.pk])

    def test_clean_data_reports_nothing(self):
        ClientServiceManager.assign(self.cliente, self.servicio)
        report = ClientServiceHealthService.run()
        self.assertEqual(report, {'issues': [], 'fixed': [], 'success': True})


class ClientServiceAPITest(BaseAPITest):

    def test_create_then_already_assigned(self):
        payload = {'client_id': self.cliente.pk, 'servicio_id': self.servicio.pk, 'notas': 'nueva'}
        response = self.client.post('/api/cliente-servicios/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'assigned')
        self.assertEqual(response.data['association']['servicio_id'], self.servicio.pk)

        response = self.client.post('/api/cliente-servicios/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'already_assigned')
        self.assertEqual(response.data['message'], 'Service is already assigned to this client')
        self.assertEqual(ClientService.objects.filter(client=self.cliente).count(), 1)

    def test_create_with_missing_service_returns_404(self):
        response = self.client.post(
            '/api/cliente-servicios/', {'client_id': self.cliente.pk, 'servicio_id': 999999}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_unassign_pair(self):
        ClientServiceManager.assign(self.cliente, self.servicio)
        url = f'/api/cliente-servicios/cliente/{self.cliente.pk}/service/{self.servicio.pk}/'
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['deleted'], 1)

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_by_client_and_count(self):
        ClientServiceManager.assign(self.cliente, self.servicio)
        ClientServiceManager.assign(self.cliente, self.otro_servicio)
        response = self.client.get(f'/api/cliente-servicios/cliente/{self.cliente.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

        response = self.client.get(f'/api/cliente-servicios/cliente/{self.cliente.pk}/count/')
        self.assertEqual(response.data, {'count': 2})

    def test_update_notes(self):
        association, _created = ClientServiceManager.assign(self.cliente, self.servicio)
        response = self.client.put(f'/api/cliente-servicios/{association.pk}/', {'notas': 'renovado'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        association.refresh_from_db()
        self.assertEqual(association.notas, 'renovado')

    def test_health_check_endpoint(self):
        ClientService.objects.create(client=self.cliente, servicio=self.servicio)
        ClientService.objects.create(client=self.cliente, servicio=self.servicio)
        response = self.client.post('/api/cliente-servicios/health-check/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(len(response.data['report']['fixed']), 1)

# ==============================================================================
# ------------------------------- CLIENTES ------------------------------------
# ==============================================================================

class ClientAPITest(BaseAPITest):

    def test_list_uses_rows_pagination(self):
        for i in range(3):
            Client.objects.create(nombre=f'Cliente {i}')
        response = self.client.get('/api/clientes/', {'limit': 2, 'sort_by': 'nombre', 'sort_dir': 'desc'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 4)
        self.assertEqual(response.data['totalPages'], 2)
        self.assertEqual(response.data['currentPage'], 1)
        self.assertEqual(len(response.data['rows']), 2)

    def test_invalid_sort_field_is_rejected(self):
        response = self.client.get('/api/clientes/', {'sort_by': 'password'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_blank_name_is_rejected(self):
        response = self.client.post('/api/clientes/', {'nombre': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('nombre', response.data)

    def test_duplicate_name_for_same_salesperson_conflicts(self):
        response = self.client.post('/api/clientes/', {'nombre': 'ACME', 'vendedor': self.vendedor.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_matrix_data(self):
        ClientServiceManager.assign(self.cliente, self.otro_servicio)
        ClientServiceManager.assign(self.cliente, self.servicio)
        response = self.client.get('/api/clientes/matrix/data/', {'vendedor': self.vendedor.pk})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['clients']), 1)
        self.assertEqual(response.data['clients'][0]['servicios'], sorted([self.servicio.pk, self.otro_servicio.pk]))
        self.assertEqual(len(response.data['services']), Service.objects.count())

    def test_delete_cascades_associations(self):
        ClientServiceManager.assign(self.cliente, self.servicio)
        response = self.client.delete(f'/api/clientes/{self.cliente.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ClientService.objects.exists())

    def test_changes_are_audited(self):
        self.client.patch(f'/api/clientes/{self.cliente.pk}/', {'notas': 'auditado'}, format='json')
        log = AuditLog.objects.filter(action__startswith='Client Actualizado').first()
        self.assertIsNotNone(log)
        self.assertEqual(log.details['pk'], self.cliente.pk)


class ServiceCatalogAPITest(BaseAPITest):

    def test_client_count_annotation(self):
        ClientServiceManager.assign(self.cliente, self.servicio)
        response = self.client.get(f'/api/servicios/{self.servicio.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['client_count'], 1)

    def test_create_service(self):
        before = Service.objects.count()
        response = self.client.post('/api/servicios/', {'nombre': 'VPN Test', 'categoria': 'Redes'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Service.objects.count(), before + 1)

# ==============================================================================
# ------------------------- TÉCNICOS Y EVALUACIONES ---------------------------
# ==============================================================================

class TechnicianAPITest(BaseAPITest):

    def test_delete_with_clients_requires_force(self):
        url = f'/api/tecnicos/{self.tecnico.pk}/'
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(response.data['can_force_delete'])
        self.assertEqual(response.data['client_count'], 1)

        response = self.client.delete(f'{url}?force=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['unassigned_clients'], 1)
        self.cliente.refresh_from_db()
        self.assertIsNone(self.cliente.tecnico)

    def test_duplicate_email_conflicts(self):
        response = self.client.post('/api/tecnicos/', {'nombre': 'Otro', 'email': 'luis@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_objective_completion_before_due_date_is_rejected(self):
        response = self.client.post(f'/api/tecnicos/{self.tecnico.pk}/objectives/', {
            'text': 'Certificación',
            'due_date': '2025-06-30',
            'completion_date': '2025-06-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('completion_date', response.data)

    def test_objective_weight_out_of_range_is_rejected(self):
        response = self.client.post(f'/api/tecnicos/{self.tecnico.pk}/objectives/', {
            'text': 'Certificación', 'weight': '150',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('weight', response.data)


class EvaluationScoringServiceTest(TestCase):

    def test_derived_fields(self):
        derived = EvaluationScoringService.derived_fields({'quality_accuracy': 6, 'knowledge_methods': 6, 'values_honesty': 6})
        self.assertEqual(derived['overall_rating'], 6)
        self.assertEqual(derived['suggested_bonus_percentage'], Decimal('10'))

        derived = EvaluationScoringService.derived_fields({'quality_accuracy': 2, 'knowledge_methods': 2})
        self.assertEqual(derived['overall_rating'], 2)
        self.assertEqual(derived['suggested_bonus_percentage'], Decimal('2'))

    def test_no_ratings(self):
        derived = EvaluationScoringService.derived_fields({})
        self.assertIsNone(derived['overall_rating'])
        self.assertEqual(derived['suggested_bonus_percentage'], Decimal('0'))


class TechnicianEvaluationAPITest(BaseAPITest):

    def setUp(self):
        super().setUp()
        self.url = f'/api/tecnicos/{self.tecnico.pk}/evaluations/'

    def test_create_computes_overall_rating(self):
        response = self.client.post(self.url, {
            'year': 2025, 'semester': 'H1', 'quality_accuracy': 4, 'knowledge_methods': 5,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        # (4 + 5) / 2 = 4.5 -> 5 redondeando mitades hacia arriba
        self.assertEqual(response.data['overall_rating'], 5)
        evaluation = TechnicianEvaluation.objects.get(pk=response.data['id'])
        self.assertEqual(evaluation.bonus_percentage, Decimal('7.00'))

    def test_duplicate_period_conflicts(self):
        TechnicianEvaluation.objects.create(technician=self.tecnico, year=2025, semester='H1')
        response = self.client.post(self.url, {'year': 2025, 'semester': 'H1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_rating_out_of_range_is_rejected(self):
        response = self.client.post(self.url, {'year': 2025, 'semester': 'H2', 'quality_accuracy': 7}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_final_evaluation_is_locked(self):
        evaluation = TechnicianEvaluation.objects.create(technician=self.tecnico, year=2025, semester='H1', status='final')
        response = self.client.patch(f'{self.url}{evaluation.pk}/', {'quality_accuracy': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        evaluation.refresh_from_db()
        self.assertIsNone(evaluation.quality_accuracy)

# ==============================================================================
# ------------------------------ OBJETIVOS ------------------------------------
# ==============================================================================

class QuantitativeObjectiveTest(BaseAPITest):

    def setUp(self):
        super().setUp()
        self.objetivo = QuantitativeObjective.objects.create(
            name='Ventas 2025', company_target=Decimal('1000.00'), minimum_acceptable=Decimal('300.00'),
            weight=Decimal('50'), start_date=date(2025, 1, 1), end_date=date(2025, 12, 31), is_global=True,
        )

    def test_assign_reports_difference(self):
        response = self.client.post(f'/api/quantitative-objectives/{self.objetivo.pk}/assign/', {
            'assignments': [
                {'salesperson_id': self.vendedor.pk, 'individual_target': '400.00'},
                {'salesperson_id': 999999, 'individual_target': '100.00'},
            ],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['results'][0]['success'])
        self.assertFalse(response.data['results'][1]['success'])
        self.assertEqual(Decimal(response.data['objective']['difference']), Decimal('600.00'))

    def test_update_assignment_recalculates_progress(self):
        assignment = SalespersonQuantitativeObjective.objects.create(
            salesperson=self.vendedor, objective=self.objetivo, individual_target=Decimal('500.00')
        )
        response = self.client.patch('/api/quantitative-objectives/update-assignment/', {
            'assignment_id': assignment.pk, 'monthly_progress': {'01': 200, '02': 350},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        assignment.refresh_from_db()
        self.assertEqual(assignment.current_value, Decimal('550.00'))
        self.assertEqual(assignment.status, 'completed')

    def test_invalid_month_key_is_rejected(self):
        assignment = SalespersonQuantitativeObjective.objects.create(salesperson=self.vendedor, objective=self.objetivo)
        response = self.client.patch('/api/quantitative-objectives/update-assignment/', {
            'assignment_id': assignment.pk, 'monthly_progress': {'13': 10},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_assign_global_splits_target(self):
        Salesperson.objects.create(nombre='Bea', email='bea@example.com')
        Salesperson.objects.create(nombre='Inactivo', email='off@example.com', estado='inactive')
        result = ObjectiveAssignmentService.assign_global()
        self.assertEqual(result['count'], 2)
        targets = set(self.objetivo.assignments.values_list('individual_target', flat=True))
        self.assertEqual(targets, {Decimal('500.00')})
        # Una segunda pasada no duplica asignaciones
        self.assertEqual(ObjectiveAssignmentService.assign_global()['count'], 0)

    def test_status_not_completed_after_end_date(self):
        assignment = SalespersonQuantitativeObjective(
            salesperson=self.vendedor, objective=self.objetivo,
            individual_target=Decimal('500.00'), monthly_progress={'01': 100},
        )
        assignment.recalculate_current_value()
        self.assertEqual(assignment.refresh_status(today=date(2025, 6, 1)), 'in_progress')
        self.assertEqual(assignment.refresh_status(today=date(2026, 1, 15)), 'not_completed')

    def test_monthly_progress_endpoint(self):
        assignment = SalespersonQuantitativeObjective.objects.create(
            salesperson=self.vendedor, objective=self.objetivo, individual_target=Decimal('500.00')
        )
        response = self.client.post(f'/api/salespersons/{self.vendedor.pk}/objectives/monthly/', {
            'assignment_id': assignment.pk, 'month': '03', 'value': 120,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['current_value']), Decimal('120.00'))
        self.assertEqual(response.data['status'], 'in_progress')


class QualitativeObjectiveAPITest(BaseAPITest):

    def test_global_objective_assigns_active_salespersons(self):
        Salesperson.objects.create(nombre='Inactivo', email='off@example.com', estado='inactive')
        response = self.client.post('/api/qualitative-objectives/', {
            'name': 'Formación en producto', 'is_global': True, 'weight': '20',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.vendedor.qualitative_objectives.count(), 1)

    def test_status_completado_sets_completion_date(self):
        create = self.client.post('/api/qualitative-objectives/', {
            'name': 'Cartera', 'salesperson_ids': [self.vendedor.pk],
        }, format='json')
        response = self.client.put(
            f"/api/qualitative-objectives/{create.data['id']}/status/", {'status': 'completado'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.data['completion_date'])


class SalespersonProgressTest(BaseAPITest):

    def test_quantitative_progress_is_weighted_and_capped(self):
        objetivo_a = QuantitativeObjective.objects.create(
            name='A', company_target=Decimal('100'), weight=Decimal('3'),
            start_date=date(2025, 1, 1), end_date=date(2025, 12, 31),
        )
        objetivo_b = QuantitativeObjective.objects.create(
            name='B', company_target=Decimal('100'), weight=Decimal('1'),
            start_date=date(2025, 1, 1), end_date=date(2025, 12, 31),
        )
        SalespersonQuantitativeObjective.objects.create(
            salesperson=self.vendedor, objective=objetivo_a, individual_target=Decimal('100'), current_value=Decimal('50')
        )
        SalespersonQuantitativeObjective.objects.create(
            salesperson=self.vendedor, objective=objetivo_b, individual_target=Decimal('100'), current_value=Decimal('300')
        )
        progress = SalespersonProgressService.for_salesperson(self.vendedor)
        # (0.5 * 3 + 1 * 1) / 4
        self.assertAlmostEqual(progress['quantitative_progress'], 0.625)
        self.assertEqual(progress['qualitative_progress'], 0.0)

    def test_delete_unassigns_clients(self):
        response = self.client.delete(f'/api/salespersons/{self.vendedor.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['unassigned_clients'], 1)
        self.cliente.refresh_from_db()
        self.assertIsNone(self.cliente.vendedor)

    def test_dashboard(self):
        response = self.client.get('/api/salespersons/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['active_salespersons'], 1)
        self.assertEqual(response.data['total_clients'], 1)

# ==============================================================================
# ------------------------------ TENANTS --------------------------------------
# ==============================================================================

class TenantTest(APITestCase):

    def setUp(self):
        self.tenant = Tenant.objects.create(name='Demo', domain='demo.example.com', max_clients=1)
        self.admin = User.objects.create_user(username='tenant_admin', email='admin@demo.com', password='testpassword')
        TenantUser.objects.create(tenant=self.tenant, user=self.admin, email=self.admin.email, role='admin', status='active')
        self.client.force_authenticate(user=self.admin)

    def test_plan_defaults_are_applied(self):
        self.assertEqual(self.tenant.max_users, 5)
        self.assertEqual(self.tenant.max_clients, 1)
        self.assertTrue(self.tenant.has_feature('client_matrix'))

    def test_client_limit(self):
        response = self.client.post('/api/clientes/', {'nombre': 'Primero'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Client.objects.get(pk=response.data['id']).tenant, self.tenant)

        response = self.client.post('/api/clientes/', {'nombre': 'Segundo'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn('Plan limit reached for clients', str(response.data['detail']))

    def test_clients_are_scoped_to_tenant(self):
        Client.objects.create(nombre='Ajeno')
        Client.objects.create(nombre='Propio', tenant=self.tenant)
        response = self.client.get('/api/clientes/')
        self.assertEqual([row['nombre'] for row in response.data['rows']], ['Propio'])

    def test_no_tenant_bypasses_limits(self):
        enforce_plan_limit(None, 'clients')
        Client.objects.create(nombre='Propio', tenant=self.tenant)
        with self.assertRaises(PlanLimitReached):
            enforce_plan_limit(self.tenant, 'clients')

    def test_current_tenant(self):
        response = self.client.get('/api/tenants/current/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], 'admin')
        self.assertEqual(response.data['plan_details']['limits']['clients'], 1)

    def test_invite_member(self):
        response = self.client.post('/api/tenants/invite/', {'email': 'nuevo@demo.com', 'role': 'user'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'invited')

        response = self.client.post('/api/tenants/invite/', {'email': 'nuevo@demo.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)


class TokenAuthTest(APITestCase):

    def setUp(self):
        self.tenant = Tenant.objects.create(name='Demo', domain='demo.example.com')
        self.user = User.objects.create_user(username='invitado', email='inv@demo.com', password='testpassword')

    def test_invited_member_must_verify_email(self):
        TenantUser.objects.create(tenant=self.tenant, user=self.user, email=self.user.email, status='invited')
        response = self.client.post('/api/token/', {'username': 'invitado', 'password': 'testpassword'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('verify your email', str(response.data['detail']))

    def test_active_member_gets_tokens(self):
        TenantUser.objects.create(tenant=self.tenant, user=self.user, email=self.user.email, status='active', role='manager')
        response = self.client.post('/api/token/', {'username': 'invitado', 'password': 'testpassword'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertEqual(response.data['user']['role'], 'manager')

    def test_wrong_password(self):
        response = self.client.post('/api/token/', {'username': 'invitado', 'password': 'mala'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

# ==============================================================================
# ------------------------------- BACKUPS -------------------------------------
# ==============================================================================

class DatabaseBackupTest(BaseAPITest):

    def setUp(self):
        super().setUp()
        self.backup_dir = tempfile.mkdtemp()
        self.override = override_settings(BACKUP_DIR=self.backup_dir)
        self.override.enable()

    def tearDown(self):
        self.override.disable()
        shutil.rmtree(self.backup_dir, ignore_errors=True)

    def test_backup_list_and_delete(self):
        response = self.client.post('/api/database/backup/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        filename = response.data['filename']
        self.assertRegex(filename, r'^backup-\d{8}-\d{6}\.json$')

        response = self.client.get('/api/database/list/')
        self.assertEqual([b['filename'] for b in response.data['backups']], [filename])
        self.assertTrue(response.data['backups'][0]['size'].endswith(' MB'))

        response = self.client.delete(f'/api/database/backup/{filename}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(DatabaseBackupService.list_backups(), [])

    def test_delete_missing_backup(self):
        response = self.client.delete('/api/database/backup/nope.json/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_rejects_invalid_names(self):
        for name in ('../settings.json', '.hidden.json', 'dump.sql', ''):
            with self.assertRaises(InvalidBackupName):
                DatabaseBackupService.resolve(name)

    def test_upload_never_overwrites_existing_backup(self):
        existing = DatabaseBackupService.resolve('backup-20250101-000000.json')
        existing.write_bytes(b'[]')

        first = DatabaseBackupService.save_upload(
            SimpleUploadedFile('backup-20250101-000000.json', b'[{"x": 1}]', content_type='application/json')
        )
        second = DatabaseBackupService.save_upload(
            SimpleUploadedFile('backup-20250101-000000.json', b'[{"x": 2}]', content_type='application/json')
        )

        self.assertEqual(existing.read_bytes(), b'[]')
        self.assertEqual(first.name, 'backup-20250101-000000-1.json')
        self.assertEqual(second.name, 'backup-20250101-000000-2.json')
        self.assertEqual(first.read_bytes(), b'[{"x": 1}]')
        self.assertEqual(second.read_bytes(), b'[{"x": 2}]')

    def test_status(self):
        response = self.client.get('/api/database/status/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'OK')
        self.assertTrue(response.data['backup_dir']['writable'])

    def test_requires_permission(self):
        self.client.force_authenticate(user=User.objects.create_user(username='normal', password='x'))
        response = self.client.get('/api/database/list/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
