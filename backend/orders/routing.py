from django.urls import re_path
from . import consumers

websocket_urlpatterns = [
    re_path(r'ws/orders/board/$', consumers.OrderBoardConsumer.as_asgi()),
    re_path(r'ws/orders/(?P<order_id>[0-9a-fA-F-]{36})/$', consumers.OrderTrackingConsumer.as_asgi()),
]
