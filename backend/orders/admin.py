from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    fields = ("name", "quantity", "price", "preparation_time", "get_line_item_total")
    readonly_fields = fields

    def get_line_item_total(self, obj):
        return obj.line_total

    get_line_item_total.short_description = "Line Item Total"

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_number",
        "user_name",
        "status",
        "total_amount",
        "payment_method",
        "is_reconciled",
        "created_at",
    )
    list_filter = ("status", "payment_method", "is_reconciled")
    search_fields = ("order_number", "user_name", "user__email")
    readonly_fields = (
        "id",
        "order_number",
        "user",
        "status",
        "total_amount",
        "estimated_time",
        "payment_status",
        "is_reconciled",
        "created_at",
        "updated_at",
    )
    inlines = [OrderItemInline]
    ordering = ("-created_at",)
