# api/plans.py
"""
Límites y funcionalidades por plan de suscripción del tenant.
"""

FREE = 'free'
BASIC = 'basic'
PREMIUM = 'premium'

PLAN_CHOICES = [(FREE, 'Free'), (BASIC, 'Basic'), (PREMIUM, 'Premium')]

PLAN_LIMITS = {
    FREE: {
        'max_users': 5,
        'max_clients': 50,
        'max_objectives': 10,
        'features': {
            'objectives': True,
            'client_matrix': True,
            'dashboard': True,
            'reports': False,
            'api': False,
            'custom_branding': False,
        },
    },
    BASIC: {
        'max_users': 20,
        'max_clients': 200,
        'max_objectives': 50,
        'features': {
            'objectives': True,
            'client_matrix': True,
            'dashboard': True,
            'reports': True,
            'api': False,
            'custom_branding': False,
        },
    },
    PREMIUM: {
        'max_users': 100,
        'max_clients': 1000,
        'max_objectives': 200,
        'features': {
            'objectives': True,
            'client_matrix': True,
            'dashboard': True,
            'reports': True,
            'api': True,
            'custom_branding': True,
        },
    },
}


def get_plan_limits(plan):
    """ Devuelve una copia de los límites del plan; un plan desconocido cae en 'free'. """
    limits = PLAN_LIMITS.get(plan) or PLAN_LIMITS[FREE]
    return {**limits, 'features': dict(limits['features'])}
