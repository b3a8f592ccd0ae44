"""
Menu tests.

Browsing is public and cached; managers create, edit, toggle and delete
items. A failed database read falls back to the last good listing.
"""
import pytest
from unittest.mock import patch
from django.core.cache import cache
from django.db import DatabaseError

from foodcourt.exceptions import NotFound
from menu.models import FoodItem
from menu.services import MENU_CACHE_KEY, MENU_READ_ERROR, MenuService
from orders.models import OrderItem


@pytest.mark.django_db
class TestMenuListing:
    """MenuService.list_items"""

    def test_lists_every_item(self, masala_dosa, filter_coffee, sold_out_item):
        listing = MenuService.list_items()

        assert listing.error is None
        assert listing.stale is False
        assert {item["name"] for item in listing.items} == {"Masala Dosa", "Filter Coffee", "Gulab Jamun"}

    def test_filters(self, masala_dosa, filter_coffee, samosa, sold_out_item):
        assert [i["name"] for i in MenuService.list_items(category="beverages").items] == ["Filter Coffee"]
        assert "Gulab Jamun" not in {i["name"] for i in MenuService.list_items(available_only=True).items}
        assert [i["name"] for i in MenuService.list_items(search="DOSA").items] == ["Masala Dosa"]

    def test_second_read_is_served_from_cache(self, masala_dosa):
        MenuService.list_items()
        assert cache.get(MENU_CACHE_KEY) is not None

        with patch.object(MenuService, "_load_all") as load_all:
            listing = MenuService.list_items()

        load_all.assert_not_called()
        assert [i["name"] for i in listing.items] == ["Masala Dosa"]

    def test_failed_read_without_cache_returns_empty_with_error(self, masala_dosa):
        with patch.object(MenuService, "_load_all", side_effect=DatabaseError("connection lost")):
            listing = MenuService.list_items()

        assert listing.items == []
        assert listing.error == MENU_READ_ERROR
        assert listing.stale is False

    def test_failed_read_falls_back_to_stale_listing(self, masala_dosa):
        MenuService.list_items()
        MenuService.invalidate_cache()

        with patch.object(MenuService, "_load_all", side_effect=DatabaseError("connection lost")):
            listing = MenuService.list_items()

        assert listing.error == MENU_READ_ERROR
        assert listing.stale is True
        assert [i["name"] for i in listing.items] == ["Masala Dosa"]


@pytest.mark.django_db
class TestMenuWrites:
    """Management writes and cache invalidation"""

    def test_toggle_availability_invalidates_cache(self, masala_dosa, django_capture_on_commit_callbacks):
        MenuService.list_items()

        with django_capture_on_commit_callbacks(execute=True):
            item = MenuService.toggle_availability(masala_dosa.id)

        assert item.is_available is False
        assert cache.get(MENU_CACHE_KEY) is None
        assert MenuService.list_items(available_only=True).items == []

    def test_update_rejects_unknown_fields(self, masala_dosa):
        with pytest.raises(ValueError):
            MenuService.update_item(masala_dosa.id, id="something-else")

    def test_get_unknown_item(self):
        with pytest.raises(NotFound):
            MenuService.get_item("not-a-uuid")

    def test_delete_keeps_order_snapshots(self, placed_order, masala_dosa):
        MenuService.delete_item(masala_dosa.id)

        assert not FoodItem.objects.filter(pk=masala_dosa.pk).exists()
        line = OrderItem.objects.get(order=placed_order, name="Masala Dosa")
        assert line.food_item is None
        assert line.price == 80
        assert line.quantity == 2


@pytest.mark.django_db
class TestMenuAPI:
    """HTTP surface for the menu"""

    def test_anonymous_can_browse(self, api_client, masala_dosa):
        response = api_client.get("/api/menu/items/")

        assert response.status_code == 200
        assert response.data["error"] is None
        assert [item["name"] for item in response.data["results"]] == ["Masala Dosa"]

    def test_available_filter(self, api_client, masala_dosa, sold_out_item):
        response = api_client.get("/api/menu/items/?available=true")
        assert [item["name"] for item in response.data["results"]] == ["Masala Dosa"]

    def test_retrieve(self, api_client, samosa):
        response = api_client.get(f"/api/menu/items/{samosa.id}/")
        assert response.status_code == 200
        assert response.data["price"] == 50

    def test_student_cannot_create(self, student_client):
        response = student_client.post("/api/menu/items/", {
            "name": "Vada Pav", "price": 25, "category": "snacks",
        }, format="json")
        assert response.status_code == 403
        assert not FoodItem.objects.filter(name="Vada Pav").exists()

    def test_manager_creates_item(self, manager_client):
        response = manager_client.post("/api/menu/items/", {
            "name": "Vada Pav",
            "description": "Mumbai street classic",
            "price": 25,
            "category": "snacks",
            "preparation_time": 4,
        }, format="json")

        assert response.status_code == 201
        assert response.data["is_available"] is True
        assert FoodItem.objects.filter(name="Vada Pav", price=25).exists()

    def test_price_must_be_positive(self, manager_client):
        response = manager_client.post("/api/menu/items/", {
            "name": "Free Lunch", "price": 0, "category": "meals",
        }, format="json")
        assert response.status_code == 400

    def test_manager_updates_price(self, manager_client, masala_dosa):
        response = manager_client.patch(
            f"/api/menu/items/{masala_dosa.id}/", {"price": 90}, format="json"
        )
        assert response.status_code == 200
        masala_dosa.refresh_from_db()
        assert masala_dosa.price == 90

    def test_manager_toggles_availability(self, manager_client, masala_dosa):
        response = manager_client.post(f"/api/menu/items/{masala_dosa.id}/toggle-availability/")
        assert response.status_code == 200
        assert response.data["is_available"] is False

    def test_manager_deletes_item(self, manager_client, samosa):
        response = manager_client.delete(f"/api/menu/items/{samosa.id}/")
        assert response.status_code == 204
        assert not FoodItem.objects.filter(pk=samosa.pk).exists()

    def test_unknown_item_is_404(self, api_client):
        response = api_client.get("/api/menu/items/00000000-0000-0000-0000-000000000000/")
        assert response.status_code == 404
        assert response.data["code"] == "not_found"
