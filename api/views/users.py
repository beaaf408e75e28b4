# api/views/users.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from ..serializers.base import BasicUserSerializer

class UserMeView(APIView):
    """
    Devuelve los datos del usuario actualmente autenticado, con su rol y tenant.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = BasicUserSerializer(request.user, context={'request': request})
        return Response(serializer.data)
