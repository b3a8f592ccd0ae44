"""
Cart API views. The cart lives in the Django session, so anonymous visitors
can fill a cart; checkout needs a signed-in user.
"""

from rest_framework import viewsets, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
import logging

from orders.serializers import OrderSerializer
from .serializers import AddToCartSerializer, CheckoutSerializer, UpdateCartItemSerializer
from .services import CartService

logger = logging.getLogger(__name__)


class CartViewSet(viewsets.ViewSet):
    """
    Endpoints:
    - GET /api/cart/ - Retrieve current cart
    - DELETE /api/cart/ - Clear all items
    - POST /api/cart/items/ - Add item to cart
    - PATCH /api/cart/items/{food_item_id}/ - Update item quantity
    - DELETE /api/cart/items/{food_item_id}/ - Remove item from cart
    - POST /api/cart/checkout/ - Convert cart to order
    """

    permission_classes = [AllowAny]

    def retrieve(self, request):
        return Response(CartService.get_cart(request).as_dict())

    def clear(self, request):
        return Response(CartService.clear(request).as_dict())

    def add_item(self, request):
        """
        Request body:
        {
            "food_item_id": "uuid",
            "quantity": 1
        }
        """
        serializer = AddToCartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            cart = CartService.add_item(
                request,
                serializer.validated_data['food_item_id'],
                serializer.validated_data['quantity'],
            )
        except ValueError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(cart.as_dict(), status=status.HTTP_201_CREATED)

    def update_item(self, request, food_item_id=None):
        serializer = UpdateCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            cart = CartService.update_quantity(request, food_item_id, serializer.validated_data['quantity'])
        except KeyError:
            return Response({"error": "Item is not in your cart."}, status=status.HTTP_404_NOT_FOUND)
        return Response(cart.as_dict())

    def remove_item(self, request, food_item_id=None):
        try:
            cart = CartService.remove_item(request, food_item_id)
        except KeyError:
            return Response({"error": "Item is not in your cart."}, status=status.HTTP_404_NOT_FOUND)
        return Response(cart.as_dict())

    def checkout(self, request):
        """
        Request body:
        {
            "customer_name": "Asha",
            "payment_method": "upi"
        }
        """
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = CartService.checkout(
            request,
            payment_method=serializer.validated_data['payment_method'],
            customer_name=serializer.validated_data['customer_name'],
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)
