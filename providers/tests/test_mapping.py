from __future__ import annotations

import re
from decimal import Decimal

from django.test import SimpleTestCase

from catalog.models import MAX_STOCK
from catalog.utils import slugify_name
from providers.errors import ValidationError
from providers.mapping import (
    admin_fields,
    external_id_for,
    product_id_for,
    to_category,
    to_preview,
    to_product_record,
)


class ProductIdTests(SimpleTestCase):
    def test_prefix_is_added_once(self):
        self.assertEqual(product_id_for("42"), "bigbuy-42")
        self.assertEqual(product_id_for(42), "bigbuy-42")
        self.assertEqual(product_id_for("bigbuy-42"), "bigbuy-42")

    def test_blank_id_rejected(self):
        for bad in (None, "", "   "):
            with self.assertRaises(ValidationError):
                product_id_for(bad)

    def test_external_id_strips_prefix(self):
        self.assertEqual(external_id_for("bigbuy-42"), "42")
        self.assertEqual(external_id_for("42"), "42")


class ProductRecordTests(SimpleTestCase):
    def _raw(self, **overrides):
        raw = {
            "id": 1001,
            "name": "Bamboo Toothbrush",
            "description": "Soft bristles. " * 20,
            "retailPrice": "4.99",
            "wholesalePrice": "1.20",
            "category": {"name": "Bathroom"},
            "brand": "EcoCo",
            "images": [{"url": "https://cdn/x/1.jpg"}, "https://cdn/x/2.jpg"],
            "stock": 12,
            "weight": "0.0205",
            "dimensions": {"length": "19", "width": 1.5, "height": None},
            "ean": "8400000000001",
            "minimumOrderQuantity": "3",
        }
        raw.update(overrides)
        return raw

    def test_full_payload(self):
        rec = to_product_record(self._raw())
        self.assertEqual(rec["id"], "bigbuy-1001")
        self.assertEqual(rec["external_id"], "1001")
        self.assertEqual(rec["origin"], "BigBuy")
        self.assertEqual(rec["price"], Decimal("4.99"))
        self.assertEqual(rec["wholesale_price"], Decimal("1.20"))
        self.assertIsNone(rec["original_price"])
        self.assertEqual(rec["category"], "Bathroom")
        self.assertEqual(rec["subcategory"], "")
        self.assertEqual(rec["brand"], "EcoCo")
        self.assertEqual(rec["images"], ["https://cdn/x/1.jpg", "https://cdn/x/2.jpg"])
        self.assertEqual(rec["thumbnail"], "https://cdn/x/1.jpg")
        self.assertEqual(rec["stock"], 12)
        self.assertTrue(rec["in_stock"])
        self.assertTrue(rec["active"])
        self.assertEqual(rec["status"], "active")
        self.assertEqual(rec["weight"], Decimal("0.021"))
        self.assertEqual(rec["dimensions"], {"length": 19.0, "width": 1.5, "height": 0.0})
        self.assertEqual(rec["sku"], "1001")
        self.assertEqual(rec["minimum_order_quantity"], 3)

    def test_price_falls_back_to_price_field(self):
        rec = to_product_record(self._raw(retailPrice=None, price="7.5"))
        self.assertEqual(rec["price"], Decimal("7.50"))

    def test_malformed_numbers_become_zero(self):
        rec = to_product_record(self._raw(retailPrice="abc", stock="n/a", wholesalePrice="x"))
        self.assertEqual(rec["price"], Decimal("0.00"))
        self.assertEqual(rec["stock"], 0)
        self.assertFalse(rec["in_stock"])
        self.assertEqual(rec["wholesale_price"], Decimal("0.00"))

    def test_negative_stock_clamped(self):
        rec = to_product_record(self._raw(stock=-4))
        self.assertEqual(rec["stock"], 0)
        self.assertFalse(rec["in_stock"])

    def test_inactive_only_when_explicitly_false(self):
        inactive = to_product_record(self._raw(active=False))
        self.assertFalse(inactive["active"])
        self.assertEqual(inactive["status"], "inactive")
        active = to_product_record(self._raw(active=None))
        self.assertTrue(active["active"])
        self.assertEqual(active["status"], "active")

    def test_values_beyond_column_range(self):
        rec = to_product_record(
            self._raw(stock="1e30", retailPrice="1e15", wholesalePrice="-1e12", weight="1e9")
        )
        self.assertEqual(rec["stock"], MAX_STOCK)
        self.assertEqual(rec["price"], Decimal("0.00"))
        self.assertEqual(rec["wholesale_price"], Decimal("0.00"))
        self.assertEqual(rec["weight"], Decimal("0.000"))
        self.assertEqual(to_product_record(self._raw(stock="99999999999999999999"))["stock"], MAX_STOCK)
        self.assertEqual(to_product_record(self._raw(stock="-1e30"))["stock"], 0)

    def test_minimal_mug_payload(self):
        rec = to_product_record({"id": "42", "name": "Eco Mug", "retailPrice": "9.5", "stock": "0"})
        self.assertEqual(rec["id"], "bigbuy-42")
        self.assertEqual(rec["price"], Decimal("9.50"))
        self.assertEqual(rec["stock"], 0)
        self.assertFalse(rec["in_stock"])
        self.assertEqual(rec["images"], [])
        self.assertEqual(rec["thumbnail"], "")
        self.assertEqual(admin_fields(rec)["slug"], "eco-mug")

    def test_minimum_order_quantity_at_least_one(self):
        self.assertEqual(to_product_record(self._raw(minimumOrderQuantity=0))["minimum_order_quantity"], 1)
        self.assertEqual(to_product_record(self._raw(minimumOrderQuantity=None))["minimum_order_quantity"], 1)

    def test_missing_id_rejected(self):
        with self.assertRaises(ValidationError):
            to_product_record(self._raw(id=None))
        with self.assertRaises(ValidationError):
            to_product_record(["not", "a", "mapping"])


class AdminFieldsTests(SimpleTestCase):
    def test_seo_defaults(self):
        rec = to_product_record({"id": 7, "name": "Solar Lamp XL!", "description": "d" * 300})
        extra = admin_fields(rec)
        self.assertEqual(extra["meta_title"], "Solar Lamp XL! - Premium Quality")
        self.assertEqual(len(extra["meta_description"]), 160)
        self.assertEqual(extra["slug"], "solar-lamp-xl")
        self.assertEqual(extra["image_alt"], "Solar Lamp XL!")
        self.assertEqual(extra["tags"], ["premium", "quality"])
        self.assertFalse(extra["featured"])
        self.assertFalse(extra["vegan"])

    def test_unnamed_product_has_empty_slug(self):
        rec = to_product_record({"id": 8})
        self.assertEqual(admin_fields(rec)["slug"], "")

    def test_slug_charset_for_awkward_names(self):
        slug_re = re.compile(r"[a-z0-9]+(-[a-z0-9]+)*")
        names = ["--A__B--", "\u00dcn\u00efcode  Name!!", "", "***", "  spaced  out  ", "Caf\u00e9 & Bar #1", "a\nb\tc"]
        for name in names:
            slug = slugify_name(name)
            self.assertTrue(slug == "" or slug_re.fullmatch(slug), (name, slug))
        self.assertEqual(slugify_name("--A__B--"), "a-b")
        self.assertEqual(slugify_name("***"), "")


class CategoryAndPreviewTests(SimpleTestCase):
    def test_category(self):
        cat = to_category({"id": 12, "name": "Garden", "parentId": 3, "hasChildren": 1})
        self.assertEqual(cat, {"id": "12", "name": "Garden", "parent_id": "3", "has_children": True})
        self.assertIsNone(to_category({"id": 1, "name": "Root"})["parent_id"])

    def test_preview_is_json_safe(self):
        preview = to_preview(to_product_record({"id": 9, "retailPrice": "3.10"}))
        self.assertEqual(preview["price"], "3.10")
        self.assertIsNone(preview["original_price"])
