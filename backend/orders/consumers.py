import json
import logging
import uuid

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.core.serializers.json import DjangoJSONEncoder
from django.db import DatabaseError

from foodcourt.exceptions import NotFound
from users.roles import can_view_dashboard
from .serializers import OrderSerializer, serialize_board
from .services import BOARD_GROUP, ORDER_READ_ERROR, OrderService, order_group_name
from .tracking import OrderStatusTracker

logger = logging.getLogger(__name__)

CLOSE_FORBIDDEN = 4003
CLOSE_NOT_FOUND = 4004


class OrderJsonConsumer(AsyncJsonWebsocketConsumer):
    """Serialized orders carry UUIDs and datetimes; encode them the Django way."""

    @classmethod
    async def encode_json(cls, content):
        return json.dumps(content, cls=DjangoJSONEncoder)


class OrderTrackingConsumer(OrderJsonConsumer):
    """
    Live status for one order.

    Outbound messages:
    - ``snapshot``: full order from a point read (on connect and on resync)
    - ``status_update``: a forward status change
    - ``notification``: one-time heads-up when the order starts preparing or
      is ready for pickup
    """

    async def connect(self):
        self.joined = False
        await self.accept()

        # Group names are built from the canonical form, so an upper-case
        # id in the URL must still land in the group the service publishes to.
        try:
            self.order_id = str(uuid.UUID(self.scope["url_route"]["kwargs"]["order_id"]))
        except ValueError:
            await self.send_json({"type": "error", "code": "not_found"})
            await self.close(code=CLOSE_NOT_FOUND)
            return
        self.group_name = order_group_name(self.order_id)
        self.tracker = OrderStatusTracker(self.order_id)

        # Join before the point read; group messages queue until connect
        # returns and anything not newer than the snapshot is discarded.
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        self.joined = True

        snapshot, close_code = await self.read_order()
        if close_code:
            await self.leave_group()
            await self.send_json({
                "type": "error",
                "code": "not_found" if close_code == CLOSE_NOT_FOUND else "forbidden",
            })
            await self.close(code=close_code)
            return

        self.tracker.load(snapshot)
        await self.send_json({"type": "snapshot", "order": snapshot})
        logger.info(f"Tracking connection opened for order {self.order_id}")

    async def disconnect(self, close_code):
        await self.leave_group()

    async def leave_group(self):
        if self.joined:
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
            self.joined = False

    @database_sync_to_async
    def read_order(self):
        user = self.scope.get("user")
        try:
            order = OrderService.get_order(self.order_id)
        except NotFound:
            logger.warning(f"Tracking requested for unknown order {self.order_id}")
            return None, CLOSE_NOT_FOUND
        if not OrderService.can_view(user, order):
            logger.warning(f"Tracking for order {self.order_id} denied to {getattr(user, 'email', 'anonymous')}")
            return None, CLOSE_FORBIDDEN
        return OrderSerializer(order).data, None

    async def receive_json(self, content, **kwargs):
        message_type = content.get("type")

        if message_type == "resync":
            await self.resync()
        elif message_type == "ping":
            await self.send_json({"type": "pong"})
        else:
            await self.send_json({"type": "error", "code": "unknown_message", "message_type": message_type})

    async def resync(self):
        snapshot, close_code = await self.read_order()
        if close_code:
            await self.close(code=close_code)
            return
        update = self.tracker.load(snapshot)
        await self.send_json({"type": "snapshot", "order": snapshot})
        if update is not None:
            await self.forward_update(update)

    async def order_status(self, event):
        """Handler for ``order.status`` group messages."""
        update = self.tracker.apply(event)
        if update is None:
            return
        await self.forward_update(update)

    async def forward_update(self, update):
        await self.send_json({
            "type": "status_update",
            "order_id": self.tracker.order_id,
            "status": update.status,
            "updated_at": update.updated_at,
        })
        if update.notification is not None:
            await self.send_json(update.notification.as_message())


class OrderBoardConsumer(OrderJsonConsumer):
    """
    Kitchen dashboard feed. Every collection change triggers a full re-read,
    so a missed or repeated invalidation is harmless.
    """

    async def connect(self):
        user = self.scope.get("user")
        await self.accept()

        if user is None or not user.is_authenticated or not can_view_dashboard(user.role):
            logger.warning(f"Board connection denied to {getattr(user, 'email', 'anonymous')}")
            await self.send_json({"type": "error", "code": "forbidden"})
            await self.close(code=CLOSE_FORBIDDEN)
            return

        await self.channel_layer.group_add(BOARD_GROUP, self.channel_name)
        self.joined = True
        await self.send_board()

    async def disconnect(self, close_code):
        if getattr(self, "joined", False):
            await self.channel_layer.group_discard(BOARD_GROUP, self.channel_name)
            self.joined = False

    @database_sync_to_async
    def read_board(self):
        try:
            return serialize_board(OrderService.get_board())
        except DatabaseError as e:
            logger.error(f"Board read failed: {e}")
            return serialize_board([], error=ORDER_READ_ERROR)

    async def send_board(self):
        board = await self.read_board()
        await self.send_json({"type": "board", **board})

    async def receive_json(self, content, **kwargs):
        if content.get("type") == "refresh":
            await self.send_board()
        elif content.get("type") == "ping":
            await self.send_json({"type": "pong"})

    async def orders_changed(self, event):
        """Handler for ``orders.changed`` group messages."""
        await self.send_board()
