"""
Orders services package.

- OrderService: order lifecycle (create, advance status, lookups, board)
- OrderRealtimeService: channel layer publishing for order events
"""

from .order_service import ORDER_READ_ERROR, OrderService, calculate_estimated_time, calculate_total
from .realtime_service import BOARD_GROUP, OrderRealtimeService, order_group_name, order_realtime_service

__all__ = [
    "OrderService",
    "ORDER_READ_ERROR",
    "OrderRealtimeService",
    "order_realtime_service",
    "order_group_name",
    "BOARD_GROUP",
    "calculate_total",
    "calculate_estimated_time",
]
