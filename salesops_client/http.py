# salesops_client/http.py
import logging
import os

import requests

from .errors import ApiError, AuthError, classify_auth_error

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'http://localhost:8000/api/'
DEFAULT_TIMEOUT = 30


class ClientSettings:
    """ Configuración del cliente: URL base de la API, token Bearer y timeout. """

    def __init__(self, api_url=DEFAULT_API_URL, token=None, timeout=DEFAULT_TIMEOUT):
        self.api_url = api_url.rstrip('/') + '/'
        self.token = token or None
        self.timeout = timeout

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ
        return cls(
            api_url=environ.get('SALESOPS_API_URL', DEFAULT_API_URL),
            token=environ.get('SALESOPS_API_TOKEN'),
            timeout=float(environ.get('SALESOPS_API_TIMEOUT', DEFAULT_TIMEOUT)),
        )


class ApiClient:
    """
    Envoltorio fino sobre requests.Session.
    Devuelve el JSON decodificado (o None si la respuesta no tiene cuerpo) y
    convierte los errores HTTP en ApiError / AuthError.
    """

    def __init__(self, settings=None, session=None):
        self.settings = settings or ClientSettings.from_env()
        self.session = session or requests.Session()
        if self.settings.token:
            self.set_token(self.settings.token)

    def set_token(self, token):
        self.settings.token = token
        self.session.headers['Authorization'] = f"Bearer {token}"

    def url(self, path):
        return self.settings.api_url + path.lstrip('/')

    def login(self, username, password):
        """ Obtiene el par de tokens JWT y deja el access token en la sesión. """
        data = self.request('POST', 'token/', json={'username': username, 'password': password})
        self.set_token(data['access'])
        return data

    def request(self, method, path, **kwargs):
        kwargs.setdefault('timeout', self.settings.timeout)
        url = self.url(path)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.warning(f"[ApiClient] {method} {url} falló: {e}")
            raise ApiError(f"Error de red en {method} {path}: {e}") from e

        payload = self._decode(response)
        if response.status_code >= 400:
            self._raise_for_status(method, path, response.status_code, payload)
        return payload

    def stream(self, path, params=None):
        """ GET en streaming para descargas; quien llama consume iter_content() y cierra la respuesta. """
        url = self.url(path)
        try:
            response = self.session.request('GET', url, params=params, stream=True, timeout=self.settings.timeout)
        except requests.RequestException as e:
            logger.warning(f"[ApiClient] GET {url} falló: {e}")
            raise ApiError(f"Error de red en GET {path}: {e}") from e

        if response.status_code >= 400:
            payload = self._decode(response)
            response.close()
            self._raise_for_status('GET', path, response.status_code, payload)
        return response

    @staticmethod
    def _decode(response):
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return {'detail': response.text}

    @staticmethod
    def _raise_for_status(method, path, status_code, payload):
        detail = payload.get('detail', '') if isinstance(payload, dict) else ''
        message = f"{method} {path} -> {status_code}: {detail or payload}"
        if status_code == 401 or (isinstance(payload, dict) and payload.get('code') == 'email_verification_required'):
            raise AuthError(message, kind=classify_auth_error(detail), status_code=status_code, payload=payload)
        raise ApiError(message, status_code=status_code, payload=payload)

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, json=None, **kwargs):
        return self.request('POST', path, json=json, **kwargs)

    def put(self, path, json=None):
        return self.request('PUT', path, json=json)

    def patch(self, path, json=None):
        return self.request('PATCH', path, json=json)

    def delete(self, path):
        return self.request('DELETE', path)
