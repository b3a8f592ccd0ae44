import logging

from django.db.models import Count, F, Sum
from django.db.models.functions import ExtractHour, ExtractWeekDay

from orders.models import Order, OrderItem

logger = logging.getLogger(__name__)

# ExtractWeekDay numbers days from Sunday (1) to Saturday (7)
WEEKDAY_NAMES = {
    1: "Sunday",
    2: "Monday",
    3: "Tuesday",
    4: "Wednesday",
    5: "Thursday",
    6: "Friday",
    7: "Saturday",
}


class OrderStatsService:
    """Aggregate order history into the figures sent to the prediction service."""

    @staticmethod
    def collect(top_items=10, peak_hours=3, busiest_days=3) -> dict:
        orders = Order.objects.filter(is_reconciled=True)

        top = (
            OrderItem.objects.filter(order__is_reconciled=True)
            .values("name")
            .annotate(count=Sum("quantity"), revenue=Sum(F("price") * F("quantity")))
            .order_by("-count", "name")[:top_items]
        )

        hours = (
            orders.annotate(hour=ExtractHour("created_at"))
            .values("hour")
            .annotate(order_count=Count("id"))
            .order_by("-order_count", "hour")[:peak_hours]
        )

        days = (
            orders.annotate(weekday=ExtractWeekDay("created_at"))
            .values("weekday")
            .annotate(order_count=Count("id"))
            .order_by("-order_count", "weekday")[:busiest_days]
        )

        stats = {
            "totalOrders": orders.count(),
            "topItems": [
                {"name": row["name"], "count": row["count"] or 0, "revenue": row["revenue"] or 0}
                for row in top
            ],
            "peakHours": [f"{row['hour']:02d}:00" for row in hours],
            "busiestDays": [WEEKDAY_NAMES[row["weekday"]] for row in days],
        }
        logger.debug(f"Collected order stats over {stats['totalOrders']} orders")
        return stats
