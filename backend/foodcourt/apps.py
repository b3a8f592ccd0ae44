from django.apps import AppConfig


class FoodcourtConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "foodcourt"
    verbose_name = "Food court"
