from __future__ import annotations

from django.urls import path

from . import views_bigbuy as bigbuy

app_name = "dashboard"

urlpatterns = [
    # BigBuy catalog
    path("api/bigbuy/search/", bigbuy.search_products, name="bigbuy_search"),
    path("api/bigbuy/categories/", bigbuy.categories, name="bigbuy_categories"),
    path("api/bigbuy/imported/", bigbuy.imported_ids, name="bigbuy_imported"),
    path("api/bigbuy/import/", bigbuy.import_product, name="bigbuy_import"),
    path("api/bigbuy/sync-products/", bigbuy.sync_products, name="bigbuy_sync_products"),
    path("api/bigbuy/ping/", bigbuy.ping, name="bigbuy_ping"),
    path(
        "api/bigbuy/products/<str:external_id>/",
        bigbuy.product_details,
        name="bigbuy_product_details",
    ),
    path(
        "api/bigbuy/products/<str:product_id>/delete/",
        bigbuy.remove_product,
        name="bigbuy_remove_product",
    ),
    path(
        "api/bigbuy/products/<str:product_id>/pricing/",
        bigbuy.update_pricing,
        name="bigbuy_update_pricing",
    ),
    # BigBuy stock
    path("api/bigbuy/stock/sync/", bigbuy.sync_stock, name="bigbuy_sync_stock"),
    path("api/bigbuy/stock/batch/", bigbuy.batch_update_stock, name="bigbuy_batch_stock"),
    path("api/bigbuy/stock/<str:product_id>/", bigbuy.product_stock, name="bigbuy_product_stock"),
]
