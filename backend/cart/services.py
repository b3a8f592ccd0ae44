"""
Cart service layer.

This service handles:
- Reading the session cart
- Adding/updating/removing items (snapshots of menu items)
- Checkout: converting the cart into an order under a per-session lock
"""
import logging

from django.conf import settings
from django.core.cache import cache

from foodcourt.exceptions import CheckoutInProgress
from menu.services import MenuService
from orders.services import OrderService
from .cart import Cart

logger = logging.getLogger(__name__)


class CartService:
    """Service for managing cart operations."""

    @staticmethod
    def get_cart(request) -> Cart:
        return Cart(request.session)

    @staticmethod
    def add_item(request, food_item_id, quantity: int = 1) -> Cart:
        """
        Add a menu item to the session cart.

        Raises:
            NotFound: If the menu item does not exist
            ValueError: If the item is currently unavailable
        """
        food_item = MenuService.get_item(food_item_id)
        if not food_item.is_available:
            raise ValueError(f"{food_item.name} is currently unavailable.")

        cart = CartService.get_cart(request)
        cart.add(food_item, quantity)
        return cart

    @staticmethod
    def update_quantity(request, food_item_id, quantity: int) -> Cart:
        cart = CartService.get_cart(request)
        cart.set_quantity(food_item_id, quantity)
        return cart

    @staticmethod
    def remove_item(request, food_item_id) -> Cart:
        cart = CartService.get_cart(request)
        cart.remove(food_item_id)
        return cart

    @staticmethod
    def clear(request) -> Cart:
        cart = CartService.get_cart(request)
        cart.clear()
        return cart

    @staticmethod
    def _lock_key(request) -> str:
        if not request.session.session_key:
            request.session.save()
        return f"checkout-lock:{request.session.session_key}"

    @staticmethod
    def checkout(request, payment_method: str, customer_name: str):
        """
        Convert the session cart into an order.

        Only one checkout per session may run at a time; a concurrent second
        attempt raises CheckoutInProgress. The cart is cleared only after the
        order was stored, so a failed checkout can be retried as-is.
        """
        lock_key = CartService._lock_key(request)
        if not cache.add(lock_key, True, settings.CHECKOUT_LOCK_TIMEOUT):
            logger.warning(f"Concurrent checkout rejected for session {request.session.session_key}")
            raise CheckoutInProgress()

        try:
            cart = CartService.get_cart(request)
            order = OrderService.create_order(
                user=request.user,
                line_items=[line.as_dict() for line in cart],
                payment_method=payment_method,
                creator_name=customer_name,
            )
            cart.clear()
        finally:
            cache.delete(lock_key)

        logger.info(f"Checkout completed: order {order.order_number} for {request.user.email}")
        return order
