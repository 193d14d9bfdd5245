# catalog/admin.py
from django.contrib import admin, messages

from catalog.models import AdminProduct, Product
from providers.errors import ConfigurationError
from providers.models import SyncLog
from providers.services.factory import get_stock_synchronizer


@admin.action(description="Sync BigBuy stock now")
def sync_selected_stock(modeladmin, request, queryset):
    ids = list(queryset.values_list("id", flat=True))
    try:
        result = get_stock_synchronizer().sync(
            product_ids=ids,
            log_type=SyncLog.TYPE_BATCH_UPDATE,
            performed_by=str(request.user.pk),
        )
    except ConfigurationError as e:
        messages.error(request, f"Stock sync skipped: {e}")
        return
    messages.success(
        request,
        f"Checked {result['checked']} product(s): "
        f"{result['successful_updates']} updated, {result['failed_updates']} failed.",
    )


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "price", "stock", "in_stock", "status", "last_stock_sync")
    list_filter = ("origin", "status", "in_stock")
    search_fields = ("id", "name", "sku", "external_id")
    readonly_fields = ("created_at", "updated_at", "last_stock_sync", "imported_at")
    actions = [sync_selected_stock]


@admin.register(AdminProduct)
class AdminProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "slug", "featured", "synced_at")
    list_filter = ("featured", "sustainable", "vegan", "cruelty_free")
    search_fields = ("id", "name", "slug", "meta_title")
    readonly_fields = ("created_at", "updated_at", "synced_at")
