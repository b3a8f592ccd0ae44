from django.contrib import admin

from .models import FoodItem
from .services import MenuService


@admin.register(FoodItem)
class FoodItemAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "price", "preparation_time", "is_available", "updated_at")
    list_filter = ("category", "is_available")
    list_editable = ("is_available",)
    search_fields = ("name", "description")
    ordering = ("category", "name")

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        MenuService.invalidate_cache()

    def delete_model(self, request, obj):
        super().delete_model(request, obj)
        MenuService.invalidate_cache()
