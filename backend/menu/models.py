import uuid

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class FoodItem(models.Model):
    class Category(models.TextChoices):
        MEALS = "meals", _("Meals")
        SNACKS = "snacks", _("Snacks")
        BEVERAGES = "beverages", _("Beverages")
        DESSERTS = "desserts", _("Desserts")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text=_("Price in whole currency units"),
    )
    image_url = models.URLField(max_length=500, blank=True)
    category = models.CharField(
        max_length=20, choices=Category.choices, default=Category.MEALS, db_index=True
    )
    is_available = models.BooleanField(default=True, db_index=True)
    preparation_time = models.PositiveIntegerField(
        default=10,
        validators=[MinValueValidator(1)],
        help_text=_("Estimated preparation time in minutes"),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["category", "name"]
        verbose_name = _("Food item")
        verbose_name_plural = _("Food items")

    def __str__(self):
        return f"{self.name} ({self.price})"
