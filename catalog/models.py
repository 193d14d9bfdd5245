# catalog/models.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List

from django.db import models
from django.utils import timezone

ORIGIN_BIGBUY = "BigBuy"

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
STATUS_CHOICES = [
    (STATUS_ACTIVE, "Active"),
    (STATUS_INACTIVE, "Inactive"),
]

# column ceilings: PositiveIntegerField, DecimalField(12, 2), DecimalField(7, 2), DecimalField(10, 3)
MAX_STOCK = 2147483647
MAX_PRICE = Decimal("9999999999.99")
MAX_MARKUP = Decimal("99999.99")
MAX_WEIGHT = Decimal("9999999.999")


# ---------- Base ----------
class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class CatalogEntry(TimeStampedModel):
    """
    Fields shared by the storefront product and its admin copy.
    `id` is derived from the supplier id (e.g. "bigbuy-42") and never regenerated.
    """

    id = models.CharField(primary_key=True, max_length=64)
    external_id = models.CharField(max_length=64, blank=True, db_index=True)
    origin = models.CharField(max_length=32, blank=True, db_index=True)

    name = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    short_description = models.TextField(blank=True)

    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    original_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    wholesale_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    markup_percent = models.DecimalField(max_digits=7, decimal_places=2, null=True, blank=True)

    category = models.CharField(max_length=120, blank=True)
    subcategory = models.CharField(max_length=120, blank=True)
    brand = models.CharField(max_length=100, blank=True)

    images: List[str] = models.JSONField(default=list, blank=True)
    thumbnail = models.CharField(max_length=500, blank=True)

    stock = models.PositiveIntegerField(default=0)
    in_stock = models.BooleanField(default=False)
    active = models.BooleanField(default=True)
    status = models.CharField(
        max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True
    )

    # kilograms; dims as {"length": .., "width": .., "height": ..}
    weight = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True)
    dimensions: Dict[str, Any] = models.JSONField(default=dict, blank=True)

    sku = models.CharField(max_length=64, blank=True)
    ean = models.CharField(max_length=32, blank=True)
    attributes: Dict[str, Any] = models.JSONField(default=dict, blank=True)
    variations: List[Any] = models.JSONField(default=list, blank=True)
    warranty = models.CharField(max_length=120, blank=True)
    minimum_order_quantity = models.PositiveIntegerField(default=1)

    last_updated = models.DateTimeField(default=timezone.now)
    last_stock_sync = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True

    def __str__(self) -> str:
        return f"{self.name or '(unnamed)'} [{self.id}]"


# ---------- Core ----------
class Product(CatalogEntry):
    imported_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "products"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["origin", "status"], name="products_origin_status_idx"),
        ]


class AdminProduct(CatalogEntry):
    """Denormalized, SEO-enriched copy used by the management console."""

    meta_title = models.CharField(max_length=300, blank=True)
    meta_description = models.CharField(max_length=160, blank=True)
    # derived from name; intentionally not unique
    slug = models.CharField(max_length=255, blank=True, db_index=True)
    image_alt = models.CharField(max_length=255, blank=True)
    tags: List[str] = models.JSONField(default=list, blank=True)

    featured = models.BooleanField(default=False)
    sustainable = models.BooleanField(default=False)
    vegan = models.BooleanField(default=False)
    cruelty_free = models.BooleanField(default=False)

    synced_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "admin_products"
        ordering = ["-created_at"]
