# api/views/authentication.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.views import TokenObtainPairView

from ..serializers.authentication import CustomTokenObtainPairSerializer
from ..serializers.base import BasicUserSerializer

class CustomTokenObtainPairView(TokenObtainPairView):
    """
    Vista personalizada para obtener tokens JWT, usando el serializer customizado.
    """
    serializer_class = CustomTokenObtainPairSerializer

class CheckAuthView(APIView):
    """
    Verifica si el usuario actual está autenticado y devuelve sus datos básicos.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = BasicUserSerializer(request.user, context={'request': request})
        return Response({"isAuthenticated": True, "user": serializer.data})
