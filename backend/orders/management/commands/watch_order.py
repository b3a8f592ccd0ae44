import asyncio

from channels.db import database_sync_to_async
from django.core.management.base import BaseCommand, CommandError

from foodcourt.exceptions import NotFound
from orders.models import Order
from orders.services import OrderService
from orders.tracking import OrderStatusTracker, OrderSubscription


class Command(BaseCommand):
    help = (
        "Follow an order's status live from the channel layer until it is completed. "
        "Needs a shared channel layer (REDIS_URL) to see updates from the web process."
    )

    def add_arguments(self, parser):
        parser.add_argument("order_number", help="Order number, e.g. FC48213907")

    def handle(self, *args, **options):
        try:
            order = OrderService.lookup_by_number(options["order_number"])
        except NotFound as e:
            raise CommandError(e.message)

        tracker = OrderStatusTracker(order.id)
        tracker.load(order)
        self.stdout.write(f"Order {order.order_number}: {order.get_status_display()}")

        if order.status == Order.OrderStatus.COMPLETED:
            return

        try:
            asyncio.run(self._watch(order, tracker))
        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING("Stopped watching."))

    async def _watch(self, order, tracker):
        async with OrderSubscription(order.id) as subscription:
            # A change made before the subscription existed is never pushed,
            # so read once more now that we are listening.
            current = await database_sync_to_async(OrderService.get_order)(order.id)
            update = tracker.load(current)
            if update is not None and self._show(order, update):
                return

            async for event in subscription:
                update = tracker.apply(event)
                if update is None:
                    continue
                if self._show(order, update):
                    break

    def _show(self, order, update) -> bool:
        self.stdout.write(f"Order {order.order_number}: {Order.OrderStatus(update.status).label}")
        if update.notification:
            self.stdout.write(self.style.SUCCESS(update.notification.message))
        return update.status == Order.OrderStatus.COMPLETED
