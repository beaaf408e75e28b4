import os
import shutil
import tempfile
import threading
import unittest
from unittest import mock

import requests

from .assignments import MATRIX_DATA, AssignmentClient
from .cache import QueryCache
from .database import COMPLETED, ERROR, PROCESSING, UPLOADING, BackupClient
from .errors import (
    AUTHENTICATION_FAILED, EMAIL_VERIFICATION_REQUIRED, ApiError, AuthError, EvaluationLocked,
    classify_auth_error,
)
from .evaluations import EvaluationDraft
from .health import HealthCheckRunner
from .http import ApiClient, ClientSettings
from .matrix import ClientMatrix
from .toggle import ToggleCoordinator, ToggleOutcome
from . import scoring


def make_assignment_client(api=None, cache=None):
    sleep = mock.Mock()
    client = AssignmentClient(api or mock.Mock(), cache=cache or QueryCache(), sleep=sleep)
    return client, sleep


class ScoringTest(unittest.TestCase):

    def test_overall_and_bonus(self):
        self.assertEqual(scoring.overall_rating([6, 6, 6]), 6)
        self.assertEqual(scoring.bonus_percentage([6, 6, 6]), 10)
        self.assertEqual(scoring.overall_rating([2, 2]), 2)
        self.assertEqual(scoring.bonus_percentage([2, 2]), 2)

    def test_no_ratings(self):
        self.assertIsNone(scoring.overall_rating({'quality_accuracy': None}))
        self.assertEqual(scoring.bonus_percentage([]), 0)

    def test_half_rounds_up_and_bonus_uses_raw_mean(self):
        # Media 4.5: nota 5, pero el bono se calcula sobre 4.5
        self.assertEqual(scoring.overall_rating([4, 5]), 5)
        self.assertEqual(scoring.bonus_percentage([4, 5]), 7)
        self.assertEqual(scoring.bonus_percentage([1, 1]), 0)

    def test_nineteen_rating_fields(self):
        self.assertEqual(len(scoring.RATING_FIELDS), 19)
        self.assertEqual(len(set(scoring.RATING_FIELDS)), 19)


class QueryCacheTest(unittest.TestCase):

    def test_fetch_caches_value(self):
        cache = QueryCache()
        loader = mock.Mock(return_value={'rows': []})
        cache.fetch(('clientServices', 1), loader)
        cache.fetch(('clientServices', 1), loader)
        loader.assert_called_once()

    def test_invalidate_by_prefix_notifies_subscribers(self):
        cache = QueryCache()
        cache.set(('clientServices', 1), 'a')
        cache.set(('clientServices', 2), 'b')
        cache.set(('serviceClients', 1), 'c')
        callback = mock.Mock()
        cache.subscribe(('clientServices', 1), callback)

        removed = cache.invalidate(('clientServices', 1))

        self.assertEqual(removed, 1)
        callback.assert_called_once_with(('clientServices', 1))
        self.assertNotIn(('clientServices', 1), cache)
        self.assertIn(('clientServices', 2), cache)
        self.assertEqual(cache.invalidate('clientServices'), 1)
        self.assertIn(('serviceClients', 1), cache)

    def test_unsubscribe(self):
        cache = QueryCache()
        callback = mock.Mock()
        unsubscribe = cache.subscribe('matrixData', callback)
        unsubscribe()
        cache.invalidate('matrixData')
        callback.assert_not_called()


class AssignmentClientTest(unittest.TestCase):

    def test_assign_returns_association_and_invalidates(self):
        api = mock.Mock()
        api.post.return_value = {'status': 'assigned', 'association': {'id': 7, 'client_id': 1, 'servicio_id': 2}}
        cache = QueryCache()
        for key in [('clientServices', 1), ('serviceClients', 2), ('matrixData', ()), ('clientServices', 9)]:
            cache.set(key, 'stale')
        client, sleep = make_assignment_client(api, cache)

        association = client.assign(1, 2, notes='hola')

        self.assertEqual(association['id'], 7)
        api.post.assert_called_once_with('cliente-servicios/', json={'client_id': 1, 'servicio_id': 2, 'notas': 'hola'})
        self.assertNotIn(('clientServices', 1), cache)
        self.assertNotIn(('serviceClients', 2), cache)
        self.assertNotIn(('matrixData', ()), cache)
        self.assertIn(('clientServices', 9), cache)
        sleep.assert_not_called()

    def test_retries_three_times_then_raises(self):
        api = mock.Mock()
        api.post.side_effect = ApiError('boom', status_code=500)
        client, sleep = make_assignment_client(api)

        with self.assertRaises(ApiError):
            client.assign(1, 2)

        self.assertEqual(api.post.call_count, 3)
        self.assertEqual(sleep.call_args_list, [mock.call(1.0), mock.call(1.0)])

    def test_recovers_after_transient_failure(self):
        api = mock.Mock()
        api.delete.side_effect = [ApiError('timeout'), None]
        client, sleep = make_assignment_client(api)
        client.unassign(1, 2)
        self.assertEqual(api.delete.call_count, 2)
        api.delete.assert_called_with('cliente-servicios/cliente/1/service/2/')
        sleep.assert_called_once_with(1.0)

    def test_already_assigned_status_is_success(self):
        api = mock.Mock()
        api.post.return_value = {'status': 'already_assigned', 'association': {'id': 3}}
        client, _sleep = make_assignment_client(api)
        self.assertEqual(client.assign(1, 2), {'id': 3})
        api.post.assert_called_once()

    def test_already_assigned_message_error_is_success(self):
        api = mock.Mock()
        api.post.side_effect = ApiError(
            'conflict', status_code=400, payload={'message': 'Service is already assigned to this client'}
        )
        client, sleep = make_assignment_client(api)
        self.assertIsNone(client.assign(1, 2))
        api.post.assert_called_once()
        sleep.assert_not_called()

    def test_update_notes(self):
        api = mock.Mock()
        api.put.return_value = {'id': 5, 'client_id': 1, 'servicio_id': 2, 'notas': 'x'}
        cache = QueryCache()
        cache.set(('clientServices', 1), 'stale')
        client, _sleep = make_assignment_client(api, cache)
        self.assertEqual(client.update_notes(5, 'x')['notas'], 'x')
        api.put.assert_called_once_with('cliente-servicios/5/', json={'notas': 'x'})
        self.assertNotIn(('clientServices', 1), cache)


class ToggleCoordinatorTest(unittest.TestCase):

    def test_assigns_when_missing_and_unassigns_when_present(self):
        assignments = mock.Mock()
        assignments.assign.return_value = {'id': 1}
        coordinator = ToggleCoordinator(assignments)
        on_success = mock.Mock()

        result = coordinator.toggle({'id': 1, 'servicios': [5]}, {'id': 6}, on_success=on_success)
        self.assertTrue(result)
        self.assertEqual(result.outcome, ToggleOutcome.ASSIGNED)
        assignments.assign.assert_called_once_with(1, 6)
        on_success.assert_called_once_with(result)

        result = coordinator.toggle({'id': 1, 'servicios': [5]}, {'id': 5})
        self.assertEqual(result.outcome, ToggleOutcome.UNASSIGNED)
        assignments.unassign.assert_called_once_with(1, 5)

    def test_failure_calls_on_error_and_clears_key(self):
        assignments = mock.Mock()
        error = ApiError('down')
        assignments.assign.side_effect = error
        coordinator = ToggleCoordinator(assignments)
        on_error = mock.Mock()

        result = coordinator.toggle({'id': 1, 'servicios': []}, {'id': 2}, on_error=on_error)

        self.assertFalse(result)
        self.assertEqual(result.outcome, ToggleOutcome.FAILED)
        self.assertIs(result.error, error)
        on_error.assert_called_once_with(error)
        self.assertFalse(coordinator.is_in_flight(1, 2))

    def test_second_toggle_for_same_pair_is_skipped(self):
        started, release = threading.Event(), threading.Event()
        assignments = mock.Mock()

        def slow_assign(client_id, service_id):
            started.set()
            release.wait(5)
            return {'id': 1}
        assignments.assign.side_effect = slow_assign
        coordinator = ToggleCoordinator(assignments)
        results = []

        worker = threading.Thread(
            target=lambda: results.append(coordinator.toggle({'id': 1, 'servicios': []}, {'id': 2}))
        )
        worker.start()
        started.wait(5)
        skipped = coordinator.toggle({'id': 1, 'servicios': []}, {'id': 2})
        release.set()
        worker.join(5)

        self.assertEqual(skipped.outcome, ToggleOutcome.SKIPPED)
        self.assertFalse(skipped)
        self.assertEqual(assignments.assign.call_count, 1)
        self.assertEqual(results[0].outcome, ToggleOutcome.ASSIGNED)


class HealthAndMatrixTest(unittest.TestCase):

    def setUp(self):
        self.api = mock.Mock()
        self.matrix_data = {
            'clients': [{'id': 1, 'nombre': 'Acme', 'servicios': [10, 11]}],
            'services': [{'id': 10, 'nombre': 'A'}, {'id': 11, 'nombre': 'B'}, {'id': 12, 'nombre': 'Z'}],
        }
        self.api.get.return_value = self.matrix_data
        self.assignments, _sleep = make_assignment_client(self.api)

    def test_health_report(self):
        self.api.post.return_value = {
            'success': True,
            'report': {'issues': ['Duplicate entries for client 1 and service 2: 2'],
                       'fixed': ['Removed duplicate entry: 123'], 'success': True},
        }
        report = HealthCheckRunner(self.api).run()
        self.assertEqual(report.fixed, ['Removed duplicate entry: 123'])
        self.api.post.assert_called_once_with('cliente-servicios/health-check/')

    def test_load_continues_when_health_check_fails(self):
        self.api.post.side_effect = ApiError('500', status_code=500)
        matrix = ClientMatrix(self.api, self.assignments).load()
        self.assertIsNone(matrix.health_report)
        self.assertEqual(matrix.client(1)['servicios'], [10, 11])
        self.api.get.assert_called_once_with('clientes/matrix/data/', params={})

    def test_toggle_scenario(self):
        self.api.post.return_value = {'status': 'assigned', 'association': {'id': 99}}
        matrix = ClientMatrix(self.api, self.assignments).refresh()

        self.assertTrue(matrix.toggle(1, 10))
        self.assertEqual(matrix.client(1)['servicios'], [11])
        self.assertTrue(matrix.toggle(1, 12))
        self.assertEqual(matrix.client(1)['servicios'], [11, 12])
        self.api.delete.assert_called_once_with('cliente-servicios/cliente/1/service/10/')

    def test_failed_toggle_refetches(self):
        self.api.delete.side_effect = ApiError('down')
        matrix = ClientMatrix(self.api, self.assignments).refresh()

        result = matrix.toggle(1, 10)

        self.assertEqual(result.outcome, ToggleOutcome.FAILED)
        self.assertEqual(self.api.get.call_count, 2)
        self.assertEqual(matrix.client(1)['servicios'], [10, 11])

    def test_failed_toggle_keeps_previous_state_when_refetch_fails(self):
        self.api.get.side_effect = [self.matrix_data, ApiError('network down')]
        self.api.delete.side_effect = ApiError('network down')
        matrix = ClientMatrix(self.api, self.assignments).refresh()

        result = matrix.toggle(1, 10)

        self.assertEqual(result.outcome, ToggleOutcome.FAILED)
        self.assertFalse(result)
        self.assertEqual(self.api.get.call_count, 2)
        self.assertEqual(matrix.client(1)['servicios'], [10, 11])

    def test_matrix_key_is_under_matrix_group(self):
        matrix = ClientMatrix(self.api, self.assignments, vendedor=3)
        self.assertEqual(matrix.cache_key[0], MATRIX_DATA)
        matrix.refresh()
        self.api.get.assert_called_once_with('clientes/matrix/data/', params={'vendedor': 3})


class EvaluationDraftTest(unittest.TestCase):

    def test_recomputes_on_every_rating(self):
        draft = EvaluationDraft(technician_id=1, year=2025, semester='H1')
        self.assertIsNone(draft.overall_rating)
        self.assertEqual(draft.bonus_percentage, 0)
        draft.set_rating('quality_accuracy', 6)
        self.assertEqual((draft.overall_rating, draft.bonus_percentage), (6, 10))
        draft.set_rating('knowledge_methods', 2)
        self.assertEqual((draft.overall_rating, draft.bonus_percentage), (4, 7))

    def test_rejects_out_of_range_rating(self):
        draft = EvaluationDraft(technician_id=1, year=2025, semester='H1')
        with self.assertRaises(ValueError):
            draft.set_rating('quality_accuracy', 7)
        with self.assertRaises(KeyError):
            draft.set_rating('unknown_field', 3)

    def test_rejects_fractional_ratings(self):
        draft = EvaluationDraft(technician_id=1, year=2025, semester='H1')
        for value in (4.7, '4.5', True, 'abc'):
            with self.assertRaises(ValueError):
                draft.set_rating('quality_accuracy', value)
        self.assertIsNone(draft.ratings['quality_accuracy'])
        draft.set_rating('quality_accuracy', 4.0)
        draft.set_rating('knowledge_methods', '5')
        self.assertEqual(draft.ratings['quality_accuracy'], 4)
        self.assertEqual(draft.ratings['knowledge_methods'], 5)

    def test_final_evaluation_is_locked(self):
        draft = EvaluationDraft.from_api({
            'id': 4, 'technician': 1, 'year': 2025, 'semester': 'H2', 'status': 'final',
            'quality_accuracy': 5, 'overall_rating': 5,
        })
        self.assertTrue(draft.is_final)
        self.assertEqual(draft.overall_rating, 5)
        with self.assertRaises(EvaluationLocked):
            draft.set_rating('quality_accuracy', 3)
        with self.assertRaises(EvaluationLocked):
            draft.set_field('supervisor_comments', 'x')

    def test_save_posts_then_puts(self):
        api = mock.Mock()
        api.post.return_value = {'id': 8}
        draft = EvaluationDraft(technician_id=1, year=2025, semester='H1', ratings={'values_honesty': 4})
        draft.save(api)
        self.assertEqual(draft.id, 8)
        payload = api.post.call_args.kwargs['json']
        self.assertEqual(payload['values_honesty'], 4)
        self.assertEqual(payload['bonus_percentage'], 7)
        draft.save(api)
        api.put.assert_called_once()
        self.assertEqual(api.put.call_args.args[0], 'tecnicos/1/evaluations/8/')


class ApiClientTest(unittest.TestCase):

    def make_response(self, status_code, payload=None):
        response = mock.Mock(status_code=status_code)
        response.content = b'{}' if payload is not None else b''
        response.json.return_value = payload
        return response

    def test_settings_from_env(self):
        settings = ClientSettings.from_env({'SALESOPS_API_URL': 'https://crm.example.com/api', 'SALESOPS_API_TOKEN': 'abc'})
        self.assertEqual(settings.api_url, 'https://crm.example.com/api/')
        self.assertEqual(settings.token, 'abc')

    def test_sets_bearer_token(self):
        session = mock.Mock(headers={})
        ApiClient(ClientSettings(token='abc'), session=session)
        self.assertEqual(session.headers['Authorization'], 'Bearer abc')

    def test_email_verification_error(self):
        session = mock.Mock(headers={})
        session.request.return_value = self.make_response(
            401, {'detail': 'Please verify your email before logging in.', 'code': 'email_verification_required'}
        )
        api = ApiClient(ClientSettings(), session=session)
        with self.assertRaises(AuthError) as ctx:
            api.login('user', 'pw')
        self.assertEqual(ctx.exception.kind, EMAIL_VERIFICATION_REQUIRED)
        self.assertTrue(ctx.exception.requires_email_verification)

    def test_generic_auth_failure(self):
        self.assertEqual(classify_auth_error('Contraseña incorrecta.'), AUTHENTICATION_FAILED)
        self.assertEqual(classify_auth_error('Please VERIFY YOUR EMAIL'), EMAIL_VERIFICATION_REQUIRED)

    def test_http_error_becomes_api_error(self):
        session = mock.Mock(headers={})
        session.request.return_value = self.make_response(409, {'detail': 'conflict'})
        api = ApiClient(ClientSettings(), session=session)
        with self.assertRaises(ApiError) as ctx:
            api.post('tecnicos/', json={})
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(ctx.exception.detail, 'conflict')

    def test_network_error_becomes_api_error(self):
        session = mock.Mock(headers={})
        session.request.side_effect = requests.ConnectionError('refused')
        api = ApiClient(ClientSettings(), session=session)
        with self.assertRaises(ApiError) as ctx:
            api.get('clientes/')
        self.assertIsNone(ctx.exception.status_code)

    def test_no_content(self):
        session = mock.Mock(headers={})
        session.request.return_value = self.make_response(204)
        api = ApiClient(ClientSettings(), session=session)
        self.assertIsNone(api.delete('clientes/1/'))


class BackupClientTest(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.backup_path = os.path.join(self.tmpdir, 'backup-20250101-000000.json')
        with open(self.backup_path, 'wb') as fh:
            fh.write(b'[' + b'{"model": "api.service"},' * 2000 + b'{}]')

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def consume_upload(self, path, data=None, headers=None, **kwargs):
        """ Simula el envío leyendo el cuerpo multipart a trozos, como hace requests. """
        self.assertTrue(headers['Content-Type'].startswith('multipart/form-data'))
        while data.read(1024):
            pass
        return {'status': 'success'}

    def test_restore_reports_upload_progress_then_phases(self):
        api = mock.Mock()
        api.post.side_effect = self.consume_upload
        events = []
        BackupClient(api).restore(self.backup_path, on_phase=lambda p, d: events.append((p, d)))

        phases = [phase for phase, _detail in events]
        self.assertEqual(phases[0], UPLOADING)
        self.assertEqual(phases[-2:], [PROCESSING, COMPLETED])
        self.assertEqual(phases.count(PROCESSING), 1)

        percents = [detail['percent'] for phase, detail in events if phase == UPLOADING]
        self.assertGreater(len(percents), 2)
        self.assertEqual(percents[0], 0)
        self.assertEqual(percents[-1], 100)
        self.assertEqual(percents, sorted(set(percents)))
        # processing llega justo después del 100 %
        before_processing = events[phases.index(PROCESSING) - 1]
        self.assertEqual(before_processing[0], UPLOADING)
        self.assertEqual(before_processing[1]['percent'], 100)
        self.assertEqual(api.post.call_args.args[0], 'database/restore-with-upload/')

    def test_restore_error_phase(self):
        api = mock.Mock()
        api.post.side_effect = ApiError('500', status_code=500)
        phases = []
        with self.assertRaises(ApiError):
            BackupClient(api).restore(self.backup_path, on_phase=lambda p, d: phases.append(p))
        self.assertEqual(phases, [UPLOADING, ERROR])

    def test_list(self):
        api = mock.Mock()
        api.get.return_value = {'backups': [{'filename': 'a.json'}]}
        self.assertEqual(BackupClient(api).list(), [{'filename': 'a.json'}])

    def make_client(self, response):
        session = mock.Mock(headers={})
        session.request.return_value = response
        return BackupClient(ApiClient(ClientSettings(), session=session)), session

    def test_download_writes_file(self):
        response = mock.Mock(status_code=200)
        response.iter_content.return_value = iter([b'[{"a": ', b'1}]'])
        backups, session = self.make_client(response)

        path = backups.download('backup-1.json', self.tmpdir)

        self.assertEqual(path, os.path.join(self.tmpdir, 'backup-1.json'))
        with open(path, 'rb') as fh:
            self.assertEqual(fh.read(), b'[{"a": 1}]')
        self.assertTrue(session.request.call_args.kwargs['stream'])
        response.close.assert_called_once()

    def test_download_maps_http_errors(self):
        response = mock.Mock(status_code=404, content=b'{}')
        response.json.return_value = {'detail': 'Backup no encontrado.'}
        backups, _session = self.make_client(response)
        with self.assertRaises(ApiError) as ctx:
            backups.download('missing.json', self.tmpdir)
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertFalse(os.path.exists(os.path.join(self.tmpdir, 'missing.json')))

        response = mock.Mock(status_code=401, content=b'{}')
        response.json.return_value = {'detail': 'Token inválido.'}
        backups, _session = self.make_client(response)
        with self.assertRaises(AuthError):
            backups.download('backup-1.json', self.tmpdir)

    def test_interrupted_download_removes_partial_file(self):
        def broken_stream(chunk_size):
            yield b'[{"a": '
            raise requests.ConnectionError('connection reset')

        response = mock.Mock(status_code=200)
        response.iter_content.side_effect = broken_stream
        backups, _session = self.make_client(response)

        with self.assertRaises(ApiError):
            backups.download('backup-1.json', self.tmpdir)
        self.assertFalse(os.path.exists(os.path.join(self.tmpdir, 'backup-1.json')))
        response.close.assert_called_once()
