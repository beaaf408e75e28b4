# salesops_client/matrix.py
"""
Modelo de la matriz cliente x servicio.

load() lanza antes el health check, pero sin depender de él: cualquier fallo
se registra y la carga de datos continúa. toggle() actualiza la copia local
de forma optimista y, si falla, la descarta y vuelve a pedir los datos.
"""
import logging

from .assignments import MATRIX_DATA
from .health import HealthCheckRunner
from .toggle import ToggleCoordinator, ToggleOutcome

logger = logging.getLogger(__name__)


class ClientMatrix:

    def __init__(self, api, assignments, cache=None, vendedor=None, tecnico=None):
        self.api = api
        self.cache = cache if cache is not None else assignments.cache
        self.coordinator = ToggleCoordinator(assignments)
        self.health = HealthCheckRunner(api)
        self.filters = {key: value for key, value in (('vendedor', vendedor), ('tecnico', tecnico)) if value}
        self.clients = []
        self.services = []
        self.health_report = None

    @property
    def cache_key(self):
        return (MATRIX_DATA, tuple(sorted(self.filters.items())))

    def load(self):
        try:
            self.health_report = self.health.run()
        except Exception as e:  # El health check nunca bloquea la carga
            logger.warning(f"[ClientMatrix] Health check fallido, se continúa: {e}")
            self.health_report = None
        return self.refresh()

    def refresh(self):
        data = self.cache.fetch(self.cache_key, lambda: self.api.get('clientes/matrix/data/', params=self.filters))
        self.clients = [dict(client, servicios=list(client.get('servicios') or [])) for client in data.get('clients', [])]
        self.services = list(data.get('services', []))
        return self

    def client(self, client_id):
        return next((c for c in self.clients if c['id'] == client_id), None)

    def service(self, service_id):
        return next((s for s in self.services if s['id'] == service_id), None)

    def has_service(self, client_id, service_id):
        client = self.client(client_id)
        return bool(client) and service_id in client['servicios']

    def toggle(self, client_id, service_id):
        client = self.client(client_id)
        service = self.service(service_id)
        if client is None or service is None:
            raise KeyError(f"Par desconocido en la matriz: {client_id}-{service_id}")

        # Copia con el estado previo para que el coordinador decida la operación
        snapshot = dict(client, servicios=list(client['servicios']))
        if service_id in client['servicios']:
            client['servicios'].remove(service_id)
        else:
            client['servicios'] = sorted(client['servicios'] + [service_id])

        result = self.coordinator.toggle(snapshot, service)
        if result.outcome == ToggleOutcome.FAILED:
            logger.info(f"[ClientMatrix] Toggle {client_id}-{service_id} falló, recargando matriz")
            self.cache.invalidate((MATRIX_DATA,))
            try:
                self.refresh()
            except Exception as e:  # Sin datos frescos se vuelve al estado previo
                logger.warning(f"[ClientMatrix] No se pudo recargar la matriz tras el fallo: {e}")
                client['servicios'] = snapshot['servicios']
        elif result.outcome == ToggleOutcome.SKIPPED:
            client['servicios'] = snapshot['servicios']
        return result
