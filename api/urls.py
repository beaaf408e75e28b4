# api/urls.py

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_nested import routers
from rest_framework_simplejwt.views import TokenRefreshView

# --- Importa los MÓDULOS de vistas ---
from .views import (
    authentication,
    users,
    clients,
    client_services,
    services_catalog,
    technicians,
    objectives,
    salespersons,
    tenants,
    database,
    utilities,
)

# ------------------- Router Principal -------------------
router = DefaultRouter()

router.register(r'clientes', clients.ClientViewSet, basename='cliente')
router.register(r'cliente-servicios', client_services.ClientServiceViewSet, basename='cliente-servicio')
router.register(r'servicios', services_catalog.ServiceViewSet, basename='servicio')
router.register(r'tecnicos', technicians.TechnicianViewSet, basename='tecnico')
# Usa kebab-case para consistencia en las URLs
router.register(r'quantitative-templates', objectives.QuantitativeObjectiveTemplateViewSet, basename='quantitative-template')
router.register(r'quantitative-objectives', objectives.QuantitativeObjectiveViewSet, basename='quantitative-objective')
router.register(r'qualitative-objectives', objectives.QualitativeObjectiveViewSet, basename='qualitative-objective')
router.register(r'salespersons', salespersons.SalespersonViewSet, basename='salesperson')
router.register(r'tenants', tenants.TenantViewSet, basename='tenant')
router.register(r'audit-logs', utilities.AuditLogViewSet, basename='auditlog')

# --- Rutas Anidadas de Técnicos (drf-nested-routers) ---
# Las vistas anidadas reciben el ID del técnico como 'tecnico_pk'.
tecnicos_router = routers.NestedDefaultRouter(router, r'tecnicos', lookup='tecnico')
tecnicos_router.register(r'evaluations', technicians.TechnicianEvaluationViewSet, basename='tecnico-evaluations')
tecnicos_router.register(r'objectives', technicians.TechnicianObjectiveViewSet, basename='tecnico-objectives')

# --- Copias de seguridad (APIView) ---
database_patterns = [
    path('list/', database.BackupListView.as_view(), name='database-list'),
    path('backup/', database.BackupCreateView.as_view(), name='database-backup'),
    path('backup/<str:filename>/', database.BackupDeleteView.as_view(), name='database-backup-delete'),
    path('download/<str:filename>/', database.BackupDownloadView.as_view(), name='database-download'),
    path('restore-with-upload/', database.RestoreWithUploadView.as_view(), name='database-restore-upload'),
    path('status/', database.DatabaseStatusView.as_view(), name='database-status'),
]

# ------------------- URLs Principales de la API -------------------
urlpatterns = [
    path('', include(router.urls)),
    # Registra /tecnicos/{tecnico_pk}/evaluations/ y /tecnicos/{tecnico_pk}/objectives/
    path('', include(tecnicos_router.urls)),

    path('database/', include(database_patterns)),

    # --- Rutas de Autenticación (APIView) ---
    path('token/', authentication.CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('auth/check/', authentication.CheckAuthView.as_view(), name='auth_check'),

    # --- Ruta de Usuario (APIView) ---
    path('users/me/', users.UserMeView.as_view(), name='user-me'),
]
