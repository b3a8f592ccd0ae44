"""
Cart and checkout tests.

The cart lives in the session; checkout turns it into an order, clears it
on success and keeps it intact on failure.
"""
import pytest
from unittest.mock import patch
from django.contrib.sessions.backends.db import SessionStore
from django.core.cache import cache
from django.db import DatabaseError

from cart.cart import CART_SESSION_KEY, Cart
from orders.models import Order


def cart_items_url(food_item=None):
    if food_item is None:
        return "/api/cart/items/"
    return f"/api/cart/items/{food_item.id}/"


def add_to_cart(client, food_item, quantity=1):
    return client.post(
        cart_items_url(), {"food_item_id": str(food_item.id), "quantity": quantity}, format="json"
    )


@pytest.mark.django_db
class TestSessionCart:
    """Cart operations on a session"""

    def test_add_merges_lines(self, masala_dosa, filter_coffee):
        cart = Cart(SessionStore())
        cart.add(masala_dosa, 1)
        cart.add(masala_dosa, 1)
        cart.add(filter_coffee, 3)

        assert len(cart) == 2
        assert cart.item_count == 5
        assert cart.total == 2 * 80 + 3 * 30

    def test_lines_are_snapshots(self, masala_dosa):
        session = SessionStore()
        Cart(session).add(masala_dosa, 1)

        masala_dosa.price = 95
        masala_dosa.save()

        assert Cart(session).total == 80
        assert session[CART_SESSION_KEY][0]["name"] == "Masala Dosa"

    def test_set_quantity_zero_removes_line(self, samosa):
        cart = Cart(SessionStore())
        cart.add(samosa, 2)
        cart.set_quantity(samosa.id, 0)
        assert len(cart) == 0

    def test_missing_line_raises_key_error(self, samosa):
        cart = Cart(SessionStore())
        with pytest.raises(KeyError):
            cart.remove(samosa.id)
        with pytest.raises(KeyError):
            cart.set_quantity(samosa.id, 2)

    def test_add_requires_positive_quantity(self, samosa):
        with pytest.raises(ValueError):
            Cart(SessionStore()).add(samosa, 0)


@pytest.mark.django_db
class TestCartAPI:
    """Cart endpoints"""

    def test_empty_cart(self, api_client):
        response = api_client.get("/api/cart/")
        assert response.status_code == 200
        assert response.data == {"items": [], "total": 0, "item_count": 0}

    def test_add_update_remove(self, api_client, masala_dosa, samosa):
        assert add_to_cart(api_client, masala_dosa, 2).status_code == 201
        add_to_cart(api_client, samosa)

        response = api_client.patch(cart_items_url(samosa), {"quantity": 3}, format="json")
        assert response.status_code == 200
        assert response.data["total"] == 2 * 80 + 3 * 50

        response = api_client.delete(cart_items_url(masala_dosa))
        assert response.status_code == 200
        assert response.data["item_count"] == 3
        assert response.data["items"][0]["line_total"] == 150

    def test_unavailable_item_rejected(self, api_client, sold_out_item):
        response = add_to_cart(api_client, sold_out_item)
        assert response.status_code == 400
        assert response.data["error"] == "Gulab Jamun is currently unavailable."

    def test_unknown_item_is_404(self, api_client):
        response = api_client.post(
            cart_items_url(), {"food_item_id": "00000000-0000-0000-0000-000000000000"}, format="json"
        )
        assert response.status_code == 404

    def test_removing_missing_line_is_404(self, api_client, samosa):
        response = api_client.delete(cart_items_url(samosa))
        assert response.status_code == 404

    def test_clear(self, api_client, samosa):
        add_to_cart(api_client, samosa, 2)
        response = api_client.delete("/api/cart/")
        assert response.data["item_count"] == 0


@pytest.mark.django_db
class TestCheckout:
    """POST /api/cart/checkout/"""

    def checkout(self, client, name="Asha", payment_method="upi"):
        return client.post(
            "/api/cart/checkout/",
            {"customer_name": name, "payment_method": payment_method},
            format="json",
        )

    def test_checkout_places_order_and_clears_cart(self, student_client, student_user, masala_dosa, filter_coffee):
        add_to_cart(student_client, masala_dosa, 2)
        add_to_cart(student_client, filter_coffee, 3)

        response = self.checkout(student_client)

        assert response.status_code == 201
        assert response.data["total_amount"] == 250
        assert response.data["status"] == "ordered"
        assert response.data["payment_status"] == "completed"
        assert response.data["estimated_time"] == 12 + 5
        assert response.data["order_number"].startswith("FC")
        assert len(response.data["items"]) == 2

        order = Order.objects.get(pk=response.data["id"])
        assert order.user == student_user
        assert order.is_reconciled is True
        assert student_client.get("/api/cart/").data["item_count"] == 0

    def test_checkout_requires_sign_in(self, api_client, samosa):
        add_to_cart(api_client, samosa)

        response = self.checkout(api_client)

        assert response.status_code == 401
        assert Order.objects.count() == 0
        assert api_client.get("/api/cart/").data["item_count"] == 1

    def test_empty_cart(self, student_client):
        response = self.checkout(student_client)
        assert response.status_code == 400
        assert response.data["code"] == "empty_cart"

    def test_blank_name_rejected(self, student_client, samosa):
        add_to_cart(student_client, samosa)
        response = self.checkout(student_client, name="   ")
        assert response.status_code == 400
        assert Order.objects.count() == 0

    def test_failed_checkout_keeps_cart(self, student_client, samosa):
        add_to_cart(student_client, samosa, 2)

        with patch(
            "orders.services.order_service.OrderService._store_items",
            side_effect=DatabaseError("write failed"),
        ):
            response = self.checkout(student_client)

        assert response.status_code == 500
        assert response.data["code"] == "partial_write_failure"
        assert student_client.get("/api/cart/").data["item_count"] == 2

    def test_concurrent_checkout_rejected(self, student_client, samosa):
        add_to_cart(student_client, samosa)
        session_key = student_client.session.session_key
        cache.add(f"checkout-lock:{session_key}", True, 30)

        response = self.checkout(student_client)

        assert response.status_code == 409
        assert response.data["code"] == "checkout_in_progress"
        assert Order.objects.count() == 0
        assert student_client.get("/api/cart/").data["item_count"] == 1

    def test_lock_released_after_checkout(self, student_client, samosa):
        add_to_cart(student_client, samosa)
        self.checkout(student_client)

        add_to_cart(student_client, samosa)
        response = self.checkout(student_client)

        assert response.status_code == 201
        assert Order.objects.count() == 2
