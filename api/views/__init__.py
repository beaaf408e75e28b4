# api/views/__init__.py
# Paquete de vistas, un módulo por área:
#api/views/authentication.py (Token JWT y chequeo de autenticación)
#api/views/users.py (Vista UserMeView)
#api/views/clients.py (ClientViewSet, resumen y matriz cliente-servicio)
#api/views/client_services.py (ClientServiceViewSet y health check)
#api/views/services_catalog.py (ServiceViewSet)
#api/views/technicians.py (Técnicos, evaluaciones y objetivos anidados)
#api/views/objectives.py (Objetivos cuantitativos y cualitativos)
#api/views/salespersons.py (Vendedores y dashboard comercial)
#api/views/tenants.py (Tenants, miembros e invitaciones)
#api/views/database.py (Copias de seguridad)
#api/views/utilities.py (AuditLogViewSet)
