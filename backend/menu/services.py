"""
Menu reads and management writes.

Reads are served from the Django cache. The last good listing is also kept
under a key without expiry so a failed database read can still show a stale
menu instead of an empty page.
"""
from dataclasses import dataclass, field
import logging

from django.conf import settings
from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from foodcourt.exceptions import NotFound
from .models import FoodItem

logger = logging.getLogger(__name__)

MENU_CACHE_KEY = "menu:items"
MENU_STALE_CACHE_KEY = "menu:items:stale"
MENU_READ_ERROR = "Could not load the latest menu. Please try again."


@dataclass
class MenuListing:
    items: list = field(default_factory=list)
    error: str = None
    stale: bool = False


class MenuService:
    EDITABLE_FIELDS = (
        "name",
        "description",
        "price",
        "image_url",
        "category",
        "is_available",
        "preparation_time",
    )

    @staticmethod
    def _serialize(items):
        from .serializers import FoodItemSerializer

        return FoodItemSerializer(items, many=True).data

    @staticmethod
    def _load_all():
        items = MenuService._serialize(FoodItem.objects.all())
        items = [dict(item) for item in items]
        cache.set(MENU_CACHE_KEY, items, settings.MENU_CACHE_TIMEOUT)
        cache.set(MENU_STALE_CACHE_KEY, items, None)
        return items

    @staticmethod
    def list_items(category=None, available_only=False, search=None) -> MenuListing:
        listing = MenuListing()

        items = cache.get(MENU_CACHE_KEY)
        if items is None:
            try:
                items = MenuService._load_all()
            except DatabaseError as e:
                logger.error(f"Menu read failed: {e}")
                items = cache.get(MENU_STALE_CACHE_KEY)
                listing.error = MENU_READ_ERROR
                listing.stale = items is not None
                items = items or []

        if category:
            items = [item for item in items if item["category"] == category]
        if available_only:
            items = [item for item in items if item["is_available"]]
        if search:
            needle = search.lower()
            items = [
                item for item in items
                if needle in item["name"].lower() or needle in item["description"].lower()
            ]

        listing.items = items
        return listing

    @staticmethod
    def invalidate_cache():
        cache.delete(MENU_CACHE_KEY)

    @staticmethod
    def get_item(item_id) -> FoodItem:
        try:
            return FoodItem.objects.get(pk=item_id)
        except (FoodItem.DoesNotExist, ValidationError):
            raise NotFound("Menu item not found.")

    @staticmethod
    @transaction.atomic
    def create_item(**data) -> FoodItem:
        item = FoodItem.objects.create(**data)
        logger.info(f"Menu item created: {item.name} ({item.id})")
        transaction.on_commit(MenuService.invalidate_cache)
        return item

    @staticmethod
    @transaction.atomic
    def update_item(item_id, **changes) -> FoodItem:
        item = MenuService.get_item(item_id)
        unknown = set(changes) - set(MenuService.EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        for attr, value in changes.items():
            setattr(item, attr, value)
        item.save(update_fields=list(changes) + ["updated_at"])
        transaction.on_commit(MenuService.invalidate_cache)
        return item

    @staticmethod
    @transaction.atomic
    def toggle_availability(item_id) -> FoodItem:
        try:
            item = FoodItem.objects.select_for_update().get(pk=item_id)
        except (FoodItem.DoesNotExist, ValidationError):
            raise NotFound("Menu item not found.")
        item.is_available = not item.is_available
        item.save(update_fields=["is_available", "updated_at"])
        logger.info(f"Menu item {item.name} availability set to {item.is_available}")
        transaction.on_commit(MenuService.invalidate_cache)
        return item

    @staticmethod
    @transaction.atomic
    def delete_item(item_id):
        """
        Remove a menu item. Past orders keep their snapshotted line items; the
        reference to the deleted item is nulled.
        """
        item = MenuService.get_item(item_id)
        name = item.name
        item.delete()
        logger.info(f"Menu item deleted: {name} ({item_id})")
        transaction.on_commit(MenuService.invalidate_cache)
