# salesops_client/errors.py
"""
Errores del cliente HTTP de SalesOps.
"""

# Subcadena con la que el backend marca a los miembros sin email verificado
EMAIL_VERIFICATION_MARKER = "verify your email"

AUTHENTICATION_FAILED = 'authentication_failed'
EMAIL_VERIFICATION_REQUIRED = 'email_verification_required'


class ApiError(Exception):
    """ Respuesta HTTP de error (o fallo de red, con status_code None). """

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload if payload is not None else {}

    @property
    def detail(self):
        if isinstance(self.payload, dict):
            return self.payload.get('detail') or self.payload.get('message') or str(self)
        return str(self)


class AuthError(ApiError):
    def __init__(self, message, kind=AUTHENTICATION_FAILED, status_code=None, payload=None):
        super().__init__(message, status_code=status_code, payload=payload)
        self.kind = kind

    @property
    def requires_email_verification(self):
        return self.kind == EMAIL_VERIFICATION_REQUIRED


class EvaluationLocked(Exception):
    """ Se intentó editar una evaluación en estado 'final'. """


def classify_auth_error(message):
    """ Devuelve el tipo de error de autenticación a partir del mensaje. """
    if message and EMAIL_VERIFICATION_MARKER in str(message).lower():
        return EMAIL_VERIFICATION_REQUIRED
    return AUTHENTICATION_FAILED
