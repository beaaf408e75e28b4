# api/exceptions.py
from rest_framework import status
from rest_framework.exceptions import APIException
from django.utils.translation import gettext_lazy as _


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _("El recurso ya existe o entra en conflicto con el estado actual.")
    default_code = 'conflict'


class PlanLimitReached(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = _("Se ha alcanzado el límite del plan.")
    default_code = 'plan_limit_reached'


class EvaluationLocked(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("La evaluación es final y no admite cambios.")
    default_code = 'evaluation_final'
