# salesops_client/cache.py
"""
Caché de consultas con invalidación por prefijo de clave.

Las claves son tuplas, p. ej. ("clientServices", 12) o ("matrixData",).
Invalidar ("clientServices",) descarta todas las entradas cuyo primer
elemento es "clientServices" y avisa a sus suscriptores para que recarguen.
"""
import logging
import threading

logger = logging.getLogger(__name__)


def _as_key(key):
    return key if isinstance(key, tuple) else (key,)


class QueryCache:

    def __init__(self):
        self._lock = threading.RLock()
        self._data = {}
        self._subscribers = {}

    def get(self, key, default=None):
        with self._lock:
            return self._data.get(_as_key(key), default)

    def set(self, key, value):
        with self._lock:
            self._data[_as_key(key)] = value
        return value

    def __contains__(self, key):
        with self._lock:
            return _as_key(key) in self._data

    def fetch(self, key, loader):
        """ Devuelve el valor cacheado o lo carga con loader() y lo guarda. """
        key = _as_key(key)
        with self._lock:
            if key in self._data:
                return self._data[key]
        value = loader()
        return self.set(key, value)

    def subscribe(self, key, callback):
        """ Registra callback(key) para cuando se invalide la clave. Devuelve la función para darse de baja. """
        key = _as_key(key)
        with self._lock:
            self._subscribers.setdefault(key, []).append(callback)

        def unsubscribe():
            with self._lock:
                callbacks = self._subscribers.get(key, [])
                if callback in callbacks:
                    callbacks.remove(callback)
                if not callbacks:
                    self._subscribers.pop(key, None)
        return unsubscribe

    def invalidate(self, prefix):
        """ Elimina las entradas que empiezan por prefix y notifica a sus suscriptores. """
        prefix = _as_key(prefix)
        size = len(prefix)
        with self._lock:
            stale = [key for key in self._data if key[:size] == prefix]
            for key in stale:
                del self._data[key]
            notify = [
                (key, list(callbacks))
                for key, callbacks in self._subscribers.items()
                if key[:size] == prefix
            ]
        # Los callbacks se ejecutan fuera del lock
        for key, callbacks in notify:
            for callback in callbacks:
                callback(key)
        logger.debug(f"[QueryCache] Invalidado {prefix}: {len(stale)} entradas")
        return len(stale)

    def clear(self):
        with self._lock:
            self._data.clear()
