import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from users.permissions import IsAdminRole
from users.roles import can_administer
from .serializers import ManagerRequestCreateSerializer, ManagerRequestSerializer
from .services import ManagerRequestService

logger = logging.getLogger(__name__)


class ManagerRequestViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Manager access requests.

    Endpoints:
    - GET /api/approvals/requests/ - admins see every request, others their own
    - POST /api/approvals/requests/ - file a request for the signed-in user
    - POST /api/approvals/requests/<id>/approve/ - admin only
    - POST /api/approvals/requests/<id>/reject/ - admin only

    Query params:
    - ?status=pending (filter by status)
    """

    serializer_class = ManagerRequestSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['status']
    ordering_fields = ['created_at', 'status']

    def get_queryset(self):
        queryset = ManagerRequestService.list_requests()
        if not can_administer(self.request.user.role):
            queryset = queryset.filter(requester=self.request.user)
        return queryset

    def get_permissions(self):
        if self.action in ('approve', 'reject', 'pending'):
            return [IsAuthenticated(), IsAdminRole()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        serializer = ManagerRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        manager_request = ManagerRequestService.submit(
            request.user,
            serializer.validated_data['name'],
            serializer.validated_data['email'],
        )
        return Response(ManagerRequestSerializer(manager_request).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        manager_request = ManagerRequestService.approve(pk, request.user)
        return Response(ManagerRequestSerializer(manager_request).data)

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        manager_request = ManagerRequestService.reject(pk, request.user)
        return Response(ManagerRequestSerializer(manager_request).data)

    @action(detail=False, methods=['get'])
    def pending(self, request):
        serializer = self.get_serializer(ManagerRequestService.pending_requests(), many=True)
        return Response(serializer.data)
