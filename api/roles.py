# api/roles.py
"""
Define constantes para los roles de los miembros de un tenant.
Esto evita errores tipográficos y hace el código más legible.
"""

class Roles:
    ADMIN = 'admin'          # Administrador del tenant (usuarios, plan, copias de seguridad)
    MANAGER = 'manager'      # Gestiona clientes, técnicos y objetivos
    USER = 'user'            # Acceso de consulta y edición básica

    @classmethod
    def choices(cls):
        return [(cls.ADMIN, 'Admin'), (cls.MANAGER, 'Manager'), (cls.USER, 'User')]
