import logging

from django.db import DatabaseError
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from foodcourt.exceptions import Forbidden
from users.permissions import IsDashboardUser
from .filters import OrderFilter
from .serializers import OrderSerializer, OrderStatusUpdateSerializer, serialize_board
from .services import ORDER_READ_ERROR, OrderService

logger = logging.getLogger(__name__)


class OrderViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Orders are placed through the cart checkout; this viewset reads them and
    moves them through the kitchen statuses.

    Endpoints:
    - GET /api/orders/ - own orders (students) or all orders (dashboard users)
    - GET /api/orders/<id>/
    - GET /api/orders/number/<order_number>/
    - POST /api/orders/<id>/status/ - dashboard users
    - GET /api/orders/board/ - dashboard users
    """

    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]
    filterset_class = OrderFilter
    search_fields = ["order_number", "user_name"]
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at"]

    def get_queryset(self):
        return OrderService.list_orders(user=self.request.user)

    def list(self, request, *args, **kwargs):
        try:
            orders = list(self.filter_queryset(self.get_queryset()))
        except DatabaseError as e:
            logger.error(f"Order list read failed: {e}")
            return Response({"results": [], "error": ORDER_READ_ERROR})
        return Response({
            "results": self.get_serializer(orders, many=True).data,
            "error": None,
        })

    def get_permissions(self):
        if self.action in ("update_status", "board"):
            return [IsAuthenticated(), IsDashboardUser()]
        return super().get_permissions()

    def _check_visible(self, order):
        if not OrderService.can_view(self.request.user, order):
            raise Forbidden("You cannot view this order.")
        return order

    def retrieve(self, request, pk=None):
        order = self._check_visible(OrderService.get_order(pk))
        return Response(OrderSerializer(order).data)

    def by_number(self, request, order_number=None):
        order = self._check_visible(OrderService.lookup_by_number(order_number))
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request, pk=None):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.advance_status(pk, serializer.validated_data["status"])
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"])
    def board(self, request):
        try:
            orders = OrderService.get_board()
        except DatabaseError as e:
            logger.error(f"Board read failed: {e}")
            return Response(serialize_board([], error=ORDER_READ_ERROR))
        return Response(serialize_board(orders))
