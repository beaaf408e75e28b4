# salesops_client/toggle.py
import enum
import logging
import threading

logger = logging.getLogger(__name__)


class ToggleOutcome(enum.Enum):
    ASSIGNED = 'assigned'
    UNASSIGNED = 'unassigned'
    SKIPPED = 'skipped'   # Ya había una operación en curso para el par
    FAILED = 'failed'


class ToggleResult:
    """ Resultado de un toggle. Es verdadero solo si la operación se completó. """

    def __init__(self, outcome, association=None, error=None):
        self.outcome = outcome
        self.association = association
        self.error = error

    @property
    def completed(self):
        return self.outcome in (ToggleOutcome.ASSIGNED, ToggleOutcome.UNASSIGNED)

    def __bool__(self):
        return self.completed

    def __repr__(self):
        return f"ToggleResult({self.outcome.name}, error={self.error!r})"


def pair_key(client_id, service_id):
    return f"{client_id}-{service_id}"


class ToggleCoordinator:
    """
    Decide entre asignar y desasignar según client['servicios'] e impide dos
    operaciones simultáneas sobre el mismo par (cliente, servicio).
    No revierte nada: ante un fallo el llamador debe recargar sus datos.
    """

    def __init__(self, assignment_client):
        self.assignments = assignment_client
        self._in_flight = set()
        self._lock = threading.Lock()

    def is_in_flight(self, client_id, service_id):
        with self._lock:
            return pair_key(client_id, service_id) in self._in_flight

    def toggle(self, client, service, on_success=None, on_error=None):
        client_id, service_id = client['id'], service['id']
        key = pair_key(client_id, service_id)
        assigned = service_id in (client.get('servicios') or [])

        with self._lock:
            if key in self._in_flight:
                logger.info(f"[ToggleCoordinator] {key} ya está en curso, se ignora")
                return ToggleResult(ToggleOutcome.SKIPPED)
            self._in_flight.add(key)

        try:
            if assigned:
                self.assignments.unassign(client_id, service_id)
                result = ToggleResult(ToggleOutcome.UNASSIGNED)
            else:
                association = self.assignments.assign(client_id, service_id)
                result = ToggleResult(ToggleOutcome.ASSIGNED, association=association)
        except Exception as e:  # AssignmentClient ya agotó sus reintentos
            logger.error(f"[ToggleCoordinator] Error en toggle {key}: {e}")
            if on_error:
                on_error(e)
            return ToggleResult(ToggleOutcome.FAILED, error=e)
        finally:
            with self._lock:
                self._in_flight.discard(key)

        if on_success:
            on_success(result)
        return result
