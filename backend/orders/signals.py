from django.dispatch import Signal, receiver
import logging

logger = logging.getLogger(__name__)

# Custom signals for order events
# Provides: sender=Order, order=order_instance
order_created = Signal()

# Provides: sender=Order, order=order_instance, old_status=str, new_status=str
order_status_changed = Signal()


# Signal receivers
@receiver(order_created)
def broadcast_order_created(sender, order, **kwargs):
    """Tell connected dashboards a new order arrived."""
    # Import here to avoid circular imports
    from .services.realtime_service import order_realtime_service

    order_realtime_service.publish_collection_changed(order, reason="created")


@receiver(order_status_changed)
def broadcast_order_status(sender, order, old_status, new_status, **kwargs):
    """Push the new status to the order's trackers and refresh dashboards."""
    from .services.realtime_service import order_realtime_service

    order_realtime_service.publish_status(order)
    order_realtime_service.publish_collection_changed(order, reason="status")
