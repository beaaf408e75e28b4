# api/serializers/authentication.py
"""
Serializers relacionados con la autenticación y obtención de tokens.
"""
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework.exceptions import AuthenticationFailed
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _

from ..models import TenantUser

# Importar serializers base necesarios
from .base import BasicUserSerializer

User = get_user_model()

# Texto fijo: los clientes lo detectan por subcadena ("verify your email")
EMAIL_VERIFICATION_MESSAGE = "Please verify your email before logging in."

class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        username = attrs.get("username")
        password = attrs.get("password")

        try:
            user = User.objects.get(username=username)
        except User.DoesNotExist:
            raise AuthenticationFailed(_("El usuario no existe."), code="authentication_failed")

        if not user.check_password(password):
            raise AuthenticationFailed(_("Contraseña incorrecta."), code="authentication_failed")

        if not user.is_active:
            raise AuthenticationFailed(_("Tu cuenta está inactiva."), code="user_inactive")

        # Miembro invitado que aún no ha verificado su email
        pending = TenantUser.objects.filter(user=user, status='invited').exists()
        active = TenantUser.objects.filter(user=user, status='active').exists()
        if pending and not active:
            raise AuthenticationFailed(EMAIL_VERIFICATION_MESSAGE, code="email_verification_required")

        data = super().validate(attrs) # Obtiene access y refresh

        # Añadir datos del usuario usando BasicUserSerializer
        data.update({'user': BasicUserSerializer(user).data})
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        # Añadir claims personalizados al token JWT
        membership = user.tenant_membership
        token['username'] = user.username
        token['role'] = membership.role if membership else None
        token['tenant_id'] = membership.tenant_id if membership else None
        return token
