from rest_framework import serializers

from orders.models import Order


class AddToCartSerializer(serializers.Serializer):
    food_item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class UpdateCartItemSerializer(serializers.Serializer):
    # Zero removes the line
    quantity = serializers.IntegerField(min_value=0)


class CheckoutSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=150)
    payment_method = serializers.ChoiceField(choices=Order.PaymentMethod.choices)

    def validate_customer_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Please enter your name.")
        return value
