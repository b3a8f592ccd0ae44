import uuid

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="FoodItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("price", models.PositiveIntegerField(help_text="Price in whole currency units", validators=[django.core.validators.MinValueValidator(1)])),
                ("image_url", models.URLField(blank=True, max_length=500)),
                ("category", models.CharField(choices=[("meals", "Meals"), ("snacks", "Snacks"), ("beverages", "Beverages"), ("desserts", "Desserts")], db_index=True, default="meals", max_length=20)),
                ("is_available", models.BooleanField(db_index=True, default=True)),
                ("preparation_time", models.PositiveIntegerField(default=10, help_text="Estimated preparation time in minutes", validators=[django.core.validators.MinValueValidator(1)])),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Food item",
                "verbose_name_plural": "Food items",
                "ordering": ["category", "name"],
            },
        ),
    ]
