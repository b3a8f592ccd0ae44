from rest_framework import serializers

from .models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    line_total = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "food_item",
            "name",
            "price",
            "image_url",
            "quantity",
            "preparation_time",
            "line_total",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    payment_method_display = serializers.CharField(source="get_payment_method_display", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "user_name",
            "items",
            "total_amount",
            "status",
            "status_display",
            "payment_method",
            "payment_method_display",
            "payment_status",
            "estimated_time",
            "is_reconciled",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=20)


def serialize_board(orders, error=None) -> dict:
    """Active orders for the dashboard, plus a count per status."""
    data = OrderSerializer(orders, many=True).data
    counts = {status: 0 for status in Order.ACTIVE_STATUSES}
    for order in orders:
        counts[order.status] = counts.get(order.status, 0) + 1
    return {"orders": data, "counts": counts, "error": error}
