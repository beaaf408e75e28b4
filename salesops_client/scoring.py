# salesops_client/scoring.py
"""
Cálculo de los campos derivados de una evaluación de técnico.

Las 19 valoraciones (1-6, opcionales) se agrupan en cinco categorías. Con las
valoraciones informadas se obtiene la nota global (media redondeada) y el
porcentaje de bono sugerido (función escalonada sobre la media sin redondear).
"""
from decimal import Decimal, ROUND_HALF_UP

RATING_CATEGORIES = {
    'quality': [
        'quality_accuracy', 'quality_output_quantity',
        'quality_organization', 'quality_use_of_tools',
    ],
    'knowledge': [
        'knowledge_technical_skill', 'knowledge_methods', 'knowledge_tools',
        'knowledge_autonomy', 'knowledge_training',
    ],
    'commitment': [
        'commitment_collaboration', 'commitment_communication', 'commitment_proactivity',
        'commitment_punctuality', 'commitment_motivation',
    ],
    'attitude': [
        'attitude_openness', 'attitude_adaptability', 'attitude_improvement',
    ],
    'values': [
        'values_honesty', 'values_responsibility',
    ],
}

RATING_FIELDS = [field for fields in RATING_CATEGORIES.values() for field in fields]

MIN_RATING = 1
MAX_RATING = 6

# (media mínima, bono) de mayor a menor
BONUS_STEPS = [(5, 10), (4, 7), (3, 5), (2, 2)]


def _present(ratings):
    if isinstance(ratings, dict):
        ratings = ratings.values()
    return [r for r in ratings if r is not None]


def average_rating(ratings):
    """ Media de las valoraciones no nulas, o None si no hay ninguna. """
    values = _present(ratings)
    if not values:
        return None
    return Decimal(sum(values)) / Decimal(len(values))


def overall_rating(ratings):
    """ Media redondeada (mitades hacia arriba) de las valoraciones no nulas. """
    avg = average_rating(ratings)
    if avg is None:
        return None
    return int(avg.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def bonus_percentage(ratings):
    avg = average_rating(ratings)
    if avg is None:
        return 0
    for threshold, bonus in BONUS_STEPS:
        if avg >= threshold:
            return bonus
    return 0


def category_averages(ratings):
    """ Media por categoría (None si la categoría no tiene valoraciones). """
    return {
        category: average_rating([ratings.get(field) for field in fields])
        for category, fields in RATING_CATEGORIES.items()
    }
