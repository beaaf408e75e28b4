# salesops_client/assignments.py
"""
Cliente de asignaciones cliente-servicio.

Cada operación se reintenta ante cualquier error (3 intentos, 1 s entre
intentos) y, si termina bien, invalida las consultas afectadas de la caché.
"""
import logging
import time

from .cache import QueryCache
from .errors import ApiError

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
RETRY_DELAY = 1.0

ALREADY_ASSIGNED = 'already_assigned'
ALREADY_ASSIGNED_MESSAGE = 'Service is already assigned to this client'

# Grupos de consultas que dependen del estado de las asociaciones
CLIENT_SERVICES = 'clientServices'
SERVICE_CLIENTS = 'serviceClients'
MATRIX_DATA = 'matrixData'


def is_already_assigned(payload):
    """ True si la respuesta indica que el par ya estaba asignado (status o mensaje). """
    if not isinstance(payload, dict):
        return False
    if payload.get('status') == ALREADY_ASSIGNED:
        return True
    message = payload.get('message') or payload.get('detail') or ''
    return ALREADY_ASSIGNED_MESSAGE.lower() in str(message).lower()


class AssignmentClient:

    def __init__(self, api, cache=None, attempts=MAX_ATTEMPTS, delay=RETRY_DELAY, sleep=time.sleep):
        self.api = api
        self.cache = cache if cache is not None else QueryCache()
        self.attempts = attempts
        self.delay = delay
        self._sleep = sleep

    def _with_retry(self, operation, func):
        last_error = None
        for attempt in range(1, self.attempts + 1):
            try:
                return func()
            except Exception as e:  # Se reintenta ante cualquier fallo
                last_error = e
                logger.warning(f"[AssignmentClient] {operation}: intento {attempt}/{self.attempts} falló: {e}")
                if attempt < self.attempts:
                    self._sleep(self.delay)
        logger.error(f"[AssignmentClient] {operation}: agotados los reintentos")
        raise last_error

    def _invalidate(self, client_id, service_id):
        self.cache.invalidate((CLIENT_SERVICES, client_id))
        self.cache.invalidate((SERVICE_CLIENTS, service_id))
        self.cache.invalidate((MATRIX_DATA,))

    def assign(self, client_id, service_id, notes=""):
        """ Asigna el servicio al cliente. Un par ya asignado cuenta como éxito. """
        payload = {'client_id': client_id, 'servicio_id': service_id, 'notas': notes or ""}

        def call():
            try:
                response = self.api.post('cliente-servicios/', json=payload)
            except ApiError as e:
                if is_already_assigned(e.payload):
                    logger.info(f"[AssignmentClient] Cliente {client_id} ya tenía el servicio {service_id}")
                    return e.payload.get('association')
                raise
            if is_already_assigned(response):
                logger.info(f"[AssignmentClient] Cliente {client_id} ya tenía el servicio {service_id}")
            return (response or {}).get('association', response)

        association = self._with_retry(f"assign {client_id}-{service_id}", call)
        self._invalidate(client_id, service_id)
        return association

    def unassign(self, client_id, service_id):
        self._with_retry(
            f"unassign {client_id}-{service_id}",
            lambda: self.api.delete(f"cliente-servicios/cliente/{client_id}/service/{service_id}/"),
        )
        self._invalidate(client_id, service_id)

    def update_notes(self, association_id, notes):
        association = self._with_retry(
            f"update_notes {association_id}",
            lambda: self.api.put(f"cliente-servicios/{association_id}/", json={'notas': notes}),
        )
        self._invalidate(association.get('client_id'), association.get('servicio_id'))
        return association
