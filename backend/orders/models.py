import random
import time
import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import IntegrityError, models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


def generate_order_number(prefix=None):
    """
    Human-readable order number: prefix, the last six digits of the
    millisecond clock and two random digits, e.g. FC48213907.
    """
    prefix = prefix or getattr(settings, "ORDER_NUMBER_PREFIX", "FC")
    timestamp = str(int(time.time() * 1000))[-6:]
    return f"{prefix}{timestamp}{random.randint(0, 99):02d}"


class Order(models.Model):
    class OrderStatus(models.TextChoices):
        ORDERED = "ordered", _("Ordered")
        PREPARING = "preparing", _("Preparing")
        READY = "ready", _("Ready for pickup")
        COMPLETED = "completed", _("Completed")

    class PaymentMethod(models.TextChoices):
        UPI = "upi", _("UPI")
        CARD = "card", _("Card")
        WALLET = "wallet", _("Wallet")
        COUNTER = "counter", _("Pay at counter")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        COMPLETED = "completed", _("Completed")

    # Forward-only lifecycle; the index is the rank
    STATUS_SEQUENCE = (
        OrderStatus.ORDERED,
        OrderStatus.PREPARING,
        OrderStatus.READY,
        OrderStatus.COMPLETED,
    )
    ACTIVE_STATUSES = (
        OrderStatus.ORDERED,
        OrderStatus.PREPARING,
        OrderStatus.READY,
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=20, unique=True, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    user_name = models.CharField(max_length=150)

    total_amount = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.ORDERED, db_index=True
    )
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )
    estimated_time = models.PositiveIntegerField(
        default=0, help_text=_("Estimated minutes until the order is ready")
    )
    is_reconciled = models.BooleanField(
        default=False,
        help_text=_("Set once every line item has been stored"),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "order_number"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=["status", "created_at"], name="order_status_created_idx"),
            models.Index(fields=["user", "created_at"], name="order_user_created_idx"),
        ]

    def __str__(self):
        return f"Order {self.order_number or self.pk} - {self.status}"

    @classmethod
    def status_rank(cls, status) -> int:
        return cls.STATUS_SEQUENCE.index(cls.OrderStatus(status))

    @classmethod
    def next_status(cls, status):
        rank = cls.status_rank(status)
        if rank + 1 >= len(cls.STATUS_SEQUENCE):
            return None
        return cls.STATUS_SEQUENCE[rank + 1]

    @property
    def rank(self) -> int:
        return self.status_rank(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.status == self.OrderStatus.COMPLETED

    def save(self, *args, **kwargs):
        # Generate order_number only if it's not already set
        if not self.order_number:
            max_retries = 5  # Prevent infinite loop in extreme race conditions
            for _ in range(max_retries):
                self.order_number = generate_order_number()
                try:
                    with transaction.atomic():
                        super().save(*args, **kwargs)
                    break
                except IntegrityError:
                    # Another order took the number; try a fresh one
                    continue
            else:
                raise IntegrityError(
                    "Failed to generate a unique order number after multiple retries."
                )
        else:
            if not self._state.adding:
                self.updated_at = timezone.now()
            super().save(*args, **kwargs)


class OrderItem(models.Model):
    """
    Snapshot of a menu item at the time of ordering. Never changed once stored.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    food_item = models.ForeignKey(
        "menu.FoodItem",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    name = models.CharField(max_length=200)
    price = models.PositiveIntegerField()
    image_url = models.URLField(max_length=500, blank=True)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    preparation_time = models.PositiveIntegerField(default=10)

    class Meta:
        ordering = ["id"]
        verbose_name = _("Order item")
        verbose_name_plural = _("Order items")

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    @property
    def line_total(self) -> int:
        return self.price * self.quantity

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Order items cannot be changed once stored.")
        super().save(*args, **kwargs)
