# api/views/tenants.py
import logging
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

# Importaciones relativas
from ..models import Tenant, TenantUser
from ..permissions import IsAuthenticated, CanManageTenantUsers
from ..serializers.tenants import (
    TenantCurrentSerializer, TenantInviteSerializer, TenantSerializer, TenantUserSerializer,
)
from ..tenancy import enforce_plan_limit, get_request_membership

logger = logging.getLogger(__name__)


class TenantViewSet(viewsets.ModelViewSet):
    """
    CRUD de Tenants (solo staff) y endpoints del tenant del usuario actual.
    """
    queryset = Tenant.objects.all()
    serializer_class = TenantSerializer

    def get_permissions(self):
        if self.action == 'current':
            self.permission_classes = [IsAuthenticated]
        elif self.action in ['users', 'invite']:
            self.permission_classes = [CanManageTenantUsers]
        else:
            self.permission_classes = [IsAdminUser]
        return super().get_permissions()

    def _membership_or_404(self, request):
        membership = get_request_membership(request)
        if membership is None:
            raise NotFound("El usuario no pertenece a ningún tenant activo.")
        return membership

    @action(detail=False, methods=['get', 'put'], url_path='current')
    def current(self, request):
        membership = self._membership_or_404(request)
        context = {**self.get_serializer_context(), 'membership': membership}
        if request.method == 'PUT':
            if not request.user.is_tenant_admin():
                return Response({"detail": "Solo el administrador del tenant puede modificarlo."},
                                status=status.HTTP_403_FORBIDDEN)
            serializer = TenantCurrentSerializer(membership.tenant, data=request.data, partial=True, context=context)
            serializer.is_valid(raise_exception=True)
            serializer.save()
            return Response(serializer.data)
        return Response(TenantCurrentSerializer(membership.tenant, context=context).data)

    @action(detail=False, methods=['get'], url_path='users')
    def users(self, request):
        membership = self._membership_or_404(request)
        members = TenantUser.objects.filter(tenant=membership.tenant).select_related('user')
        return Response(TenantUserSerializer(members, many=True).data)

    @action(detail=False, methods=['post'], url_path='invite')
    def invite(self, request):
        membership = self._membership_or_404(request)
        enforce_plan_limit(membership.tenant, 'users')
        serializer = TenantInviteSerializer(data=request.data, context={'tenant': membership.tenant})
        serializer.is_valid(raise_exception=True)
        member = serializer.save()
        logger.info(f"[TenantViewSet] {request.user.username} invitó a {member.email} al tenant {membership.tenant_id}")
        return Response(TenantUserSerializer(member).data, status=status.HTTP_201_CREATED)
