"""
Pushes order changes to websocket clients through the channel layer.

Two kinds of groups are used:
- ``order_<id>``: one per order, receives ``order.status`` events
- ``orders_board``: the whole collection, receives ``orders.changed``
  invalidations so dashboards re-query
"""
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

logger = logging.getLogger(__name__)

BOARD_GROUP = "orders_board"


def order_group_name(order_id) -> str:
    return f"order_{order_id}"


class OrderRealtimeService:
    """Publishes order events once the surrounding transaction has committed."""

    def __init__(self, channel_layer=None):
        self._channel_layer = channel_layer

    @property
    def channel_layer(self):
        if self._channel_layer is not None:
            return self._channel_layer
        return get_channel_layer()

    def _defer(self, callback):
        if transaction.get_connection().in_atomic_block:
            transaction.on_commit(callback)
        else:
            callback()

    def _group_send(self, group_name, message):
        if not self.channel_layer:
            logger.warning("No channel layer available for order notifications")
            return
        try:
            async_to_sync(self.channel_layer.group_send)(group_name, message)
        except Exception as e:
            # Clients resync on reconnect, so a lost push is recoverable
            logger.error(f"Error sending {message['type']} to {group_name}: {e}")

    @staticmethod
    def status_event(order) -> dict:
        return {
            "type": "order.status",
            "order_id": str(order.id),
            "order_number": order.order_number,
            "status": order.status,
            "updated_at": order.updated_at.isoformat(),
        }

    def publish_status(self, order):
        event = self.status_event(order)
        logger.info(f"Publishing status {order.status} for order {order.order_number}")
        self._defer(lambda: self._group_send(order_group_name(order.id), event))

    def publish_collection_changed(self, order, reason: str):
        message = {
            "type": "orders.changed",
            "order_id": str(order.id),
            "reason": reason,
        }
        self._defer(lambda: self._group_send(BOARD_GROUP, message))


order_realtime_service = OrderRealtimeService()
