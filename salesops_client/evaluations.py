# salesops_client/evaluations.py
import logging
from decimal import Decimal, InvalidOperation

from . import scoring
from .errors import EvaluationLocked

logger = logging.getLogger(__name__)

FINAL = 'final'
DRAFT = 'draft'


class EvaluationDraft:
    """
    Borrador de evaluación de técnico.
    overall_rating y bonus_percentage se recalculan en cada set_rating; una
    evaluación 'final' no admite más cambios.
    """

    def __init__(self, technician_id, year, semester, ratings=None, status=DRAFT, **extra):
        self.technician_id = technician_id
        self.year = year
        self.semester = semester
        self.status = status
        self.id = extra.pop('id', None)
        self.extra = extra
        self.ratings = {field: None for field in scoring.RATING_FIELDS}
        self.overall_rating = None
        self.bonus_percentage = 0
        for field, value in (ratings or {}).items():
            self._store(field, value)
        self._recalculate()

    @classmethod
    def from_api(cls, data):
        data = dict(data)
        ratings = {field: data.pop(field, None) for field in scoring.RATING_FIELDS}
        for derived in ('overall_rating', 'bonus_percentage', 'suggested_bonus_percentage', 'category_averages'):
            data.pop(derived, None)
        return cls(
            technician_id=data.pop('technician', None),
            year=data.pop('year'),
            semester=data.pop('semester'),
            ratings=ratings,
            status=data.pop('status', DRAFT),
            **data,
        )

    @property
    def is_final(self):
        return self.status == FINAL

    def _ensure_editable(self):
        if self.is_final:
            raise EvaluationLocked(f"La evaluación {self.year}-{self.semester} es final y no admite cambios.")

    def _store(self, field, value):
        if field not in self.ratings:
            raise KeyError(f"Valoración desconocida: {field}")
        if value is None:
            self.ratings[field] = None
            return
        rating = self._as_integer(field, value)
        if not (scoring.MIN_RATING <= rating <= scoring.MAX_RATING):
            raise ValueError(f"{field} debe estar entre {scoring.MIN_RATING} y {scoring.MAX_RATING}")
        self.ratings[field] = rating

    @staticmethod
    def _as_integer(field, value):
        """ Acepta 4, 4.0 o '4'; rechaza 4.7, booleanos y texto no numérico. """
        if isinstance(value, bool):
            raise ValueError(f"{field} debe ser un número entero")
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"{field} debe ser un número entero")
        if not number.is_finite() or number != number.to_integral_value():
            raise ValueError(f"{field} debe ser un número entero")
        return int(number)

    def _recalculate(self):
        self.overall_rating = scoring.overall_rating(self.ratings)
        self.bonus_percentage = scoring.bonus_percentage(self.ratings)

    def set_rating(self, field, value):
        self._ensure_editable()
        self._store(field, value)
        self._recalculate()
        return self.overall_rating

    def set_field(self, name, value):
        self._ensure_editable()
        self.extra[name] = value

    def finalize(self):
        self._ensure_editable()
        self.status = FINAL
        logger.info(f"[EvaluationDraft] Evaluación {self.year}-{self.semester} del técnico {self.technician_id} finalizada")

    def to_payload(self):
        payload = dict(self.extra)
        payload.update(self.ratings)
        payload.update({
            'year': self.year,
            'semester': self.semester,
            'status': self.status,
            'bonus_percentage': self.bonus_percentage,
        })
        return payload

    def save(self, api):
        """ Crea o actualiza la evaluación en tecnicos/<id>/evaluations/. """
        base = f"tecnicos/{self.technician_id}/evaluations/"
        if self.id is None:
            data = api.post(base, json=self.to_payload())
            self.id = data.get('id')
        else:
            data = api.put(f"{base}{self.id}/", json=self.to_payload())
        return data
