# providers/admin.py
from django.contrib import admin

from providers.models import SyncLog


@admin.register(SyncLog)
class SyncLogAdmin(admin.ModelAdmin):
    """Audit trail: viewable, never editable."""

    list_display = (
        "log_type",
        "timestamp",
        "total_processed",
        "successful_updates",
        "failed_updates",
        "performed_by",
    )
    list_filter = ("log_type",)
    date_hierarchy = "timestamp"
    search_fields = ("performed_by", "category")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
