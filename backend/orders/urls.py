from django.urls import path

from .views import OrderViewSet

app_name = "orders"

urlpatterns = [
    path("", OrderViewSet.as_view({"get": "list"}), name="order-list"),
    path("board/", OrderViewSet.as_view({"get": "board"}), name="order-board"),
    path("number/<str:order_number>/", OrderViewSet.as_view({"get": "by_number"}), name="order-by-number"),
    path("<uuid:pk>/", OrderViewSet.as_view({"get": "retrieve"}), name="order-detail"),
    path("<uuid:pk>/status/", OrderViewSet.as_view({"post": "update_status"}), name="order-status"),
]
