# salesops_client/__init__.py
from .assignments import AssignmentClient
from .cache import QueryCache
from .database import BackupClient
from .errors import ApiError, AuthError, EvaluationLocked
from .evaluations import EvaluationDraft
from .health import HealthCheckRunner, HealthReport
from .http import ApiClient, ClientSettings
from .matrix import ClientMatrix
from .toggle import ToggleCoordinator, ToggleOutcome, ToggleResult
