"""
Orders API tests.

Reading orders with ownership rules, looking them up by number and moving
them through the kitchen statuses from the dashboard.
"""
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from orders.models import Order
from orders.services import ORDER_READ_ERROR, OrderService


def rows(response):
    return response.data["results"] if isinstance(response.data, dict) else response.data


@pytest.mark.django_db
class TestReadingOrders:
    """GET endpoints"""

    def test_student_lists_own_orders(self, student_client, placed_order):
        response = student_client.get("/api/orders/")
        assert response.status_code == 200
        assert [row["id"] for row in rows(response)] == [str(placed_order.id)]

    def test_other_student_sees_nothing(self, client_for, other_student, placed_order):
        response = client_for(other_student).get("/api/orders/")
        assert rows(response) == []

    def test_manager_lists_all_orders(self, manager_client, placed_order):
        response = manager_client.get("/api/orders/")
        assert [row["order_number"] for row in rows(response)] == [placed_order.order_number]

    def test_status_filter(self, manager_client, placed_order):
        assert rows(manager_client.get("/api/orders/?status=preparing")) == []
        assert len(rows(manager_client.get("/api/orders/?status=ordered"))) == 1

    def test_anonymous_is_401(self, api_client, placed_order):
        assert api_client.get("/api/orders/").status_code == 401

    def test_retrieve_own_order(self, student_client, placed_order):
        response = student_client.get(f"/api/orders/{placed_order.id}/")

        assert response.status_code == 200
        assert response.data["user_name"] == "Asha"
        assert {item["name"] for item in response.data["items"]} == {"Masala Dosa", "Filter Coffee"}

    def test_retrieve_other_students_order_is_403(self, client_for, other_student, placed_order):
        response = client_for(other_student).get(f"/api/orders/{placed_order.id}/")
        assert response.status_code == 403
        assert response.data["code"] == "forbidden"

    def test_lookup_by_number(self, student_client, placed_order):
        response = student_client.get(f"/api/orders/number/{placed_order.order_number}/")
        assert response.status_code == 200
        assert response.data["id"] == str(placed_order.id)

    def test_unknown_number_is_404(self, student_client):
        response = student_client.get("/api/orders/number/FC00000000/")
        assert response.status_code == 404

    def test_read_failure_returns_empty_list_with_error(self, student_client, placed_order):
        with patch.object(OrderService, "list_orders", side_effect=DatabaseError("db down")):
            response = student_client.get("/api/orders/")

        assert response.status_code == 200
        assert response.data == {"results": [], "error": ORDER_READ_ERROR}


@pytest.mark.django_db
class TestStatusUpdates:
    """POST /api/orders/<id>/status/"""

    def test_manager_advances_order(self, manager_client, placed_order):
        response = manager_client.post(
            f"/api/orders/{placed_order.id}/status/", {"status": "preparing"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["status"] == "preparing"
        placed_order.refresh_from_db()
        assert placed_order.status == Order.OrderStatus.PREPARING

    def test_skipping_is_409(self, manager_client, placed_order):
        response = manager_client.post(
            f"/api/orders/{placed_order.id}/status/", {"status": "completed"}, format="json"
        )

        assert response.status_code == 409
        assert response.data["code"] == "invalid_transition"
        placed_order.refresh_from_db()
        assert placed_order.status == Order.OrderStatus.ORDERED

    def test_unknown_status_is_409(self, manager_client, placed_order):
        response = manager_client.post(
            f"/api/orders/{placed_order.id}/status/", {"status": "burnt"}, format="json"
        )
        assert response.status_code == 409
        assert response.data["code"] == "invalid_transition"
        placed_order.refresh_from_db()
        assert placed_order.status == Order.OrderStatus.ORDERED

    def test_unknown_status_on_unknown_order_is_404(self, manager_client):
        response = manager_client.post(
            "/api/orders/00000000-0000-0000-0000-000000000000/status/", {"status": "burnt"}, format="json"
        )
        assert response.status_code == 404

    def test_student_cannot_update(self, student_client, placed_order):
        response = student_client.post(
            f"/api/orders/{placed_order.id}/status/", {"status": "preparing"}, format="json"
        )
        assert response.status_code == 403

    def test_unknown_order_is_404(self, manager_client):
        response = manager_client.post(
            "/api/orders/00000000-0000-0000-0000-000000000000/status/", {"status": "preparing"}, format="json"
        )
        assert response.status_code == 404


@pytest.mark.django_db
class TestBoard:
    """GET /api/orders/board/"""

    def test_manager_sees_active_orders(self, manager_client, preparing_order):
        response = manager_client.get("/api/orders/board/")

        assert response.status_code == 200
        assert [o["id"] for o in response.data["orders"]] == [str(preparing_order.id)]
        assert response.data["counts"] == {"ordered": 0, "preparing": 1, "ready": 0}

    def test_student_is_forbidden(self, student_client):
        assert student_client.get("/api/orders/board/").status_code == 403

    def test_read_failure_returns_empty_board_with_error(self, manager_client, preparing_order):
        with patch.object(OrderService, "get_board", side_effect=DatabaseError("db down")):
            response = manager_client.get("/api/orders/board/")

        assert response.status_code == 200
        assert response.data["orders"] == []
        assert response.data["counts"] == {"ordered": 0, "preparing": 0, "ready": 0}
        assert response.data["error"] == ORDER_READ_ERROR
