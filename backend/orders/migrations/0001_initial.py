import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("menu", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("order_number", models.CharField(editable=False, max_length=20, unique=True)),
                ("user_name", models.CharField(max_length=150)),
                ("total_amount", models.PositiveIntegerField(default=0)),
                ("status", models.CharField(choices=[("ordered", "Ordered"), ("preparing", "Preparing"), ("ready", "Ready for pickup"), ("completed", "Completed")], db_index=True, default="ordered", max_length=20)),
                ("payment_method", models.CharField(choices=[("upi", "UPI"), ("card", "Card"), ("wallet", "Wallet"), ("counter", "Pay at counter")], max_length=20)),
                ("payment_status", models.CharField(choices=[("pending", "Pending"), ("completed", "Completed")], default="pending", max_length=20)),
                ("estimated_time", models.PositiveIntegerField(default=0, help_text="Estimated minutes until the order is ready")),
                ("is_reconciled", models.BooleanField(default=False, help_text="Set once every line item has been stored")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="orders", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "ordering": ["-created_at", "order_number"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="order_status_created_idx"),
                    models.Index(fields=["user", "created_at"], name="order_user_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("price", models.PositiveIntegerField()),
                ("image_url", models.URLField(blank=True, max_length=500)),
                ("quantity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("preparation_time", models.PositiveIntegerField(default=10)),
                ("food_item", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="order_items", to="menu.fooditem")),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.order")),
            ],
            options={
                "verbose_name": "Order item",
                "verbose_name_plural": "Order items",
                "ordering": ["id"],
            },
        ),
    ]
