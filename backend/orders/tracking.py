"""
Reconciles what an order tracker displays with the events it receives.

Events can arrive late, twice, or after a fresh point read already showed a
newer status. The tracker only ever moves forward, and each status that
deserves a heads-up produces exactly one notification.
"""
from dataclasses import dataclass
import logging
from typing import Optional

from channels.layers import get_channel_layer

from .models import Order
from .services.realtime_service import order_group_name

logger = logging.getLogger(__name__)

NOTIFICATION_MESSAGES = {
    Order.OrderStatus.PREPARING: "Your order is now being prepared!",
    Order.OrderStatus.READY: "Your order is ready for pickup!",
}


@dataclass(frozen=True)
class StatusNotification:
    order_id: str
    status: str
    message: str

    def as_message(self) -> dict:
        return {
            "type": "notification",
            "order_id": self.order_id,
            "status": self.status,
            "message": self.message,
        }


@dataclass(frozen=True)
class TrackerUpdate:
    status: str
    updated_at: Optional[str] = None
    notification: Optional[StatusNotification] = None


class OrderStatusTracker:
    def __init__(self, order_id=None):
        self.order_id = str(order_id) if order_id else None
        self.status = None
        self.updated_at = None

    @property
    def loaded(self) -> bool:
        return self.status is not None

    def load(self, snapshot) -> Optional[TrackerUpdate]:
        """
        Take the status from a point read (an Order or its serialized form).

        The first load just sets the display. A later load, e.g. after a
        reconnect, is treated like an event so a transition missed while
        offline still advances the display and notifies once.
        """
        if isinstance(snapshot, Order):
            snapshot = {
                "id": str(snapshot.id),
                "status": snapshot.status,
                "updated_at": snapshot.updated_at.isoformat() if snapshot.updated_at else None,
            }

        if self.order_id is None and snapshot.get("id"):
            self.order_id = str(snapshot["id"])

        if not self.loaded:
            self.status = Order.OrderStatus(snapshot["status"])
            self.updated_at = snapshot.get("updated_at")
            return None

        return self.apply(snapshot)

    def apply(self, event) -> Optional[TrackerUpdate]:
        """
        Apply a pushed status event. Returns None when the event is discarded
        (another order, unknown status, or not newer than what is shown).
        """
        event_order_id = event.get("order_id") or event.get("id")
        if self.order_id and event_order_id and str(event_order_id) != self.order_id:
            return None

        try:
            status = Order.OrderStatus(event.get("status"))
        except ValueError:
            logger.warning(f"Ignoring event with unknown status {event.get('status')!r}")
            return None

        if self.loaded and Order.status_rank(status) <= Order.status_rank(self.status):
            logger.debug(f"Discarding stale event {status} for order {self.order_id} showing {self.status}")
            return None

        self.status = status
        self.updated_at = event.get("updated_at")

        notification = None
        if status in NOTIFICATION_MESSAGES:
            notification = StatusNotification(self.order_id, status.value, NOTIFICATION_MESSAGES[status])
        return TrackerUpdate(status=status.value, updated_at=self.updated_at, notification=notification)


class OrderSubscription:
    """
    Scoped membership of a fresh channel in an order's group.

        async with OrderSubscription(order_id) as subscription:
            async for event in subscription:
                ...

    The group is left on every way out of the block, including errors and
    task cancellation.
    """

    def __init__(self, order_id, channel_layer=None):
        self.order_id = str(order_id)
        self.group_name = order_group_name(order_id)
        self.channel_layer = channel_layer
        self.channel_name = None

    @property
    def active(self) -> bool:
        return self.channel_name is not None

    async def __aenter__(self):
        if self.channel_layer is None:
            self.channel_layer = get_channel_layer()
        self.channel_name = await self.channel_layer.new_channel()
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        logger.debug(f"Subscribed {self.channel_name} to {self.group_name}")
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self.channel_name is not None:
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
            logger.debug(f"Unsubscribed {self.channel_name} from {self.group_name}")
            self.channel_name = None
        return False

    async def receive(self) -> dict:
        if not self.active:
            raise RuntimeError("Subscription is not active.")
        return await self.channel_layer.receive(self.channel_name)

    def __aiter__(self):
        return self

    async def __anext__(self):
        while self.active:
            message = await self.receive()
            if message.get("type") == "order.status":
                return message
        raise StopAsyncIteration
