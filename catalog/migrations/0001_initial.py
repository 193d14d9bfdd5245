import django.utils.timezone
from decimal import Decimal
from django.db import migrations, models


def _catalog_fields():
    # shared by products and admin_products
    return [
        ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
        ("external_id", models.CharField(blank=True, db_index=True, max_length=64)),
        ("origin", models.CharField(blank=True, db_index=True, max_length=32)),
        ("name", models.CharField(blank=True, max_length=255)),
        ("description", models.TextField(blank=True)),
        ("short_description", models.TextField(blank=True)),
        (
            "price",
            models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
        ),
        (
            "original_price",
            models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True),
        ),
        (
            "wholesale_price",
            models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True),
        ),
        (
            "markup_percent",
            models.DecimalField(blank=True, decimal_places=2, max_digits=7, null=True),
        ),
        ("category", models.CharField(blank=True, max_length=120)),
        ("subcategory", models.CharField(blank=True, max_length=120)),
        ("brand", models.CharField(blank=True, max_length=100)),
        ("images", models.JSONField(blank=True, default=list)),
        ("thumbnail", models.CharField(blank=True, max_length=500)),
        ("stock", models.PositiveIntegerField(default=0)),
        ("in_stock", models.BooleanField(default=False)),
        ("active", models.BooleanField(default=True)),
        (
            "status",
            models.CharField(
                choices=[("active", "Active"), ("inactive", "Inactive")],
                db_index=True,
                default="active",
                max_length=16,
            ),
        ),
        (
            "weight",
            models.DecimalField(blank=True, decimal_places=3, max_digits=10, null=True),
        ),
        ("dimensions", models.JSONField(blank=True, default=dict)),
        ("sku", models.CharField(blank=True, max_length=64)),
        ("ean", models.CharField(blank=True, max_length=32)),
        ("attributes", models.JSONField(blank=True, default=dict)),
        ("variations", models.JSONField(blank=True, default=list)),
        ("warranty", models.CharField(blank=True, max_length=120)),
        ("minimum_order_quantity", models.PositiveIntegerField(default=1)),
        ("last_updated", models.DateTimeField(default=django.utils.timezone.now)),
        ("last_stock_sync", models.DateTimeField(blank=True, null=True)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=_catalog_fields()
            + [
                ("imported_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "db_table": "products",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["origin", "status"], name="products_origin_status_idx")
                ],
            },
        ),
        migrations.CreateModel(
            name="AdminProduct",
            fields=_catalog_fields()
            + [
                ("meta_title", models.CharField(blank=True, max_length=300)),
                ("meta_description", models.CharField(blank=True, max_length=160)),
                ("slug", models.CharField(blank=True, db_index=True, max_length=255)),
                ("image_alt", models.CharField(blank=True, max_length=255)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("featured", models.BooleanField(default=False)),
                ("sustainable", models.BooleanField(default=False)),
                ("vegan", models.BooleanField(default=False)),
                ("cruelty_free", models.BooleanField(default=False)),
                ("synced_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "db_table": "admin_products",
                "ordering": ["-created_at"],
            },
        ),
    ]
