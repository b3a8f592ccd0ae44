"""
Core order lifecycle: placing an order from cart line items, moving it
forward through the kitchen statuses and reading it back.
"""
import logging
from typing import Iterable, Mapping

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from foodcourt.exceptions import (
    EmptyCart,
    InvalidTransition,
    NotFound,
    PartialWriteFailure,
    Unauthenticated,
)
from users.roles import can_view_dashboard
from ..models import Order, OrderItem
from ..signals import order_created, order_status_changed

logger = logging.getLogger(__name__)

ORDER_READ_ERROR = "Could not load orders. Please try again."


def calculate_total(line_items) -> int:
    return sum(int(line["price"]) * int(line["quantity"]) for line in line_items)


def calculate_estimated_time(line_items) -> int:
    buffer_minutes = getattr(settings, "ORDER_PREP_BUFFER_MINUTES", 5)
    return max(int(line["preparation_time"]) for line in line_items) + buffer_minutes


class OrderService:

    @staticmethod
    def _validate_line_items(line_items):
        for line in line_items:
            if int(line["quantity"]) < 1:
                raise ValueError(f"Quantity for {line['name']} must be at least 1.")
            if int(line["price"]) < 0:
                raise ValueError(f"Price for {line['name']} cannot be negative.")

    @staticmethod
    def create_order(
        user,
        line_items: Iterable[Mapping],
        payment_method: str,
        creator_name: str,
    ) -> Order:
        """
        Place an order for `user` from snapshotted line items.

        Each line item is a mapping with ``name``, ``price``, ``quantity``,
        ``preparation_time`` and optionally ``food_item_id`` and ``image_url``.

        The header is stored first and marked reconciled only once every line
        item is stored. If the items cannot be written the header is kept
        unreconciled and PartialWriteFailure is raised.

        Raises:
            Unauthenticated: No signed-in user
            EmptyCart: No line items
            ValueError: Blank name, unknown payment method or bad quantities
            PartialWriteFailure: Header stored but line items were not
        """
        if user is None or not user.is_authenticated:
            raise Unauthenticated("Please sign in to place an order.")

        line_items = list(line_items or [])
        if not line_items:
            raise EmptyCart()

        creator_name = (creator_name or "").strip()
        if not creator_name:
            raise ValueError("Please enter your name.")
        if payment_method not in Order.PaymentMethod.values:
            raise ValueError(f"Unknown payment method: {payment_method!r}")

        OrderService._validate_line_items(line_items)

        with transaction.atomic():
            order = Order(
                user=user,
                user_name=creator_name,
                total_amount=calculate_total(line_items),
                estimated_time=calculate_estimated_time(line_items),
                payment_method=payment_method,
                # Payment is simulated and always succeeds
                payment_status=Order.PaymentStatus.COMPLETED,
                status=Order.OrderStatus.ORDERED,
                is_reconciled=False,
            )
            order.save()

        try:
            with transaction.atomic():
                OrderService._store_items(order, line_items)
                order.is_reconciled = True
                order.save(update_fields=["is_reconciled", "updated_at"])
        except (DatabaseError, ValueError) as e:
            logger.error(
                f"Order {order.order_number} stored without its line items: {e}",
                exc_info=True,
            )
            raise PartialWriteFailure(order_id=order.id)

        logger.info(
            f"Order {order.order_number} placed by {user.email}: "
            f"{len(line_items)} lines, total {order.total_amount}"
        )
        order_created.send(sender=Order, order=order)
        return order

    @staticmethod
    def _store_items(order, line_items):
        from menu.models import FoodItem

        referenced = {str(line["food_item_id"]) for line in line_items if line.get("food_item_id")}
        existing = {
            str(pk) for pk in FoodItem.objects.filter(pk__in=referenced).values_list("pk", flat=True)
        }

        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                # Menu item may have been deleted since it was added to the cart
                food_item_id=line.get("food_item_id") if str(line.get("food_item_id")) in existing else None,
                name=line["name"],
                price=int(line["price"]),
                image_url=line.get("image_url") or "",
                quantity=int(line["quantity"]),
                preparation_time=int(line["preparation_time"]),
            )
            for line in line_items
        ])

    @staticmethod
    @transaction.atomic
    def advance_status(order_id, new_status) -> Order:
        """
        Move an order to the next status.

        Only the immediate successor of the current status is accepted.
        Requesting the current status again returns the order unchanged and
        publishes nothing.

        Raises:
            NotFound: Unknown order id
            InvalidTransition: Unknown status, a step backwards or a skipped step
        """
        try:
            order = Order.objects.select_for_update().get(id=order_id)
        except (Order.DoesNotExist, ValidationError):
            raise NotFound("Order not found.")

        if new_status not in Order.OrderStatus.values:
            raise InvalidTransition(order.status, new_status, f"Unknown status: {new_status!r}")

        if new_status == order.status:
            logger.debug(f"Order {order.order_number} already {new_status}; nothing to do")
            return order

        if Order.next_status(order.status) != new_status:
            logger.warning(
                f"Rejected status change for order {order.order_number}: "
                f"{order.status} -> {new_status}"
            )
            raise InvalidTransition(order.status, new_status)

        old_status = order.status
        order.status = new_status
        order.save(update_fields=["status", "updated_at"])

        logger.info(f"Order {order.order_number} moved {old_status} -> {new_status}")
        order_status_changed.send(
            sender=Order, order=order, old_status=old_status, new_status=new_status
        )
        return order

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return Order.objects.prefetch_related("items").get(id=order_id)
        except (Order.DoesNotExist, ValidationError):
            raise NotFound("Order not found.")

    @staticmethod
    def lookup_by_number(order_number: str) -> Order:
        try:
            return Order.objects.prefetch_related("items").get(order_number=order_number)
        except Order.DoesNotExist:
            raise NotFound(f"Order {order_number} not found.")

    @staticmethod
    def can_view(user, order) -> bool:
        if user is None or not user.is_authenticated:
            return False
        return order.user_id == user.pk or can_view_dashboard(user.role)

    @staticmethod
    def list_orders(user=None, status=None):
        """
        Students see their own orders; dashboard users see every reconciled
        order. Newest first.
        """
        queryset = Order.objects.prefetch_related("items").order_by("-created_at")

        if user is not None:
            if not user.is_authenticated:
                raise Unauthenticated()
            if can_view_dashboard(user.role):
                queryset = queryset.filter(is_reconciled=True)
            else:
                queryset = queryset.filter(user=user)
        else:
            queryset = queryset.filter(is_reconciled=True)

        if status:
            queryset = queryset.filter(status=status)
        return queryset

    @staticmethod
    def get_board():
        """Active orders for the kitchen dashboard, oldest first."""
        return list(
            Order.objects.filter(is_reconciled=True, status__in=Order.ACTIVE_STATUSES)
            .prefetch_related("items")
            .order_by("created_at")
        )
