from django.contrib import admin

from .models import ManagerRequest


@admin.register(ManagerRequest)
class ManagerRequestAdmin(admin.ModelAdmin):
    list_display = ('email', 'name', 'status', 'reviewed_by', 'reviewed_at', 'created_at')
    list_filter = ('status',)
    search_fields = ('email', 'name', 'requester__email')
    readonly_fields = ('id', 'requester', 'reviewed_by', 'reviewed_at', 'created_at', 'updated_at')
    ordering = ('-created_at',)
