# providers/services/importer.py
from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Set

from django.utils import timezone

from catalog.models import MAX_MARKUP, MAX_PRICE, ORIGIN_BIGBUY
from providers.adapters.bigbuy import clamp_limit
from providers.errors import ProductNotFound, ValidationError
from providers.mapping import (
    admin_fields,
    external_id_for,
    product_id_for,
    to_category,
    to_product_record,
)
from providers.models import PERFORMED_BY_SYSTEM, SyncLog
from providers.services.store import ADMIN_PRODUCTS, PRODUCTS, SYNC_LOGS, ProductStore

log = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


class CatalogImporter:
    """Admin-triggered search / detail / import flow against BigBuy."""

    def __init__(self, *, client, store: ProductStore):
        self.client = client
        self.store = store

    # ---------- read-only lookups ----------
    def search_products(
        self,
        query: str = "",
        category: str = "",
        limit: int = 50,
        offset: int = 0,
    ) -> Dict[str, Any]:
        self.client.ensure_configured()
        try:
            offset = max(0, int(offset or 0))
        except (TypeError, ValueError):
            raise ValidationError("offset must be an integer") from None

        page = self.client.fetch_products(
            query=(query or "").strip() or None,
            category=str(category or "").strip() or None,
            limit=clamp_limit(limit),
            offset=offset,
        )
        items: List[Dict[str, Any]] = []
        for raw in page["items"]:
            try:
                items.append(to_product_record(raw))
            except ValidationError as e:
                log.warning("search.item_skipped err=%s", e)

        total = page["total"]
        log.info(
            "search.done query=%r category=%r results=%s total=%s", query, category, len(items), total
        )
        return {
            "items": items,
            "total": total,
            # dropped rows still occupy upstream positions
            "has_more": offset + len(page["items"]) < total,
        }

    def get_product_details(self, external_id: str) -> Dict[str, Any]:
        ext = external_id_for(_require_id(external_id))
        self.client.ensure_configured()
        record = to_product_record(self.client.fetch_product_detail(ext))
        log.info("detail.done product=%s name=%r", record["id"], record["name"])
        return record

    def get_categories(self) -> List[Dict[str, Any]]:
        self.client.ensure_configured()
        cats = [to_category(c) for c in self.client.fetch_categories()]
        log.info("categories.done count=%s", len(cats))
        return cats

    def imported_external_ids(self) -> Set[str]:
        """The set the console checks before offering an import."""
        return {
            doc["external_id"]
            for doc in self.store.query_documents(PRODUCTS, origin=ORIGIN_BIGBUY)
            if doc.get("external_id")
        }

    # ---------- writes ----------
    def import_product(
        self, external_id: str, *, performed_by: str = PERFORMED_BY_SYSTEM
    ) -> Dict[str, Any]:
        """
        detail fetch -> transform -> single write. Re-importing the same id
        lands on the same document and replaces its fields.
        """
        record = self.get_product_details(external_id)
        if not record["name"]:
            log.warning("import.unnamed_product product=%s", record["id"])

        now = timezone.now()
        product = {**record, "last_updated": now, "imported_at": now}
        self.store.set_document(PRODUCTS, record["id"], product)
        self.store.merge_document(
            ADMIN_PRODUCTS,
            record["id"],
            {**record, **admin_fields(record), "last_updated": now, "synced_at": now},
        )
        log.info("import.done product=%s by=%s", record["id"], performed_by)
        return product

    def remove_product(self, product_id: str) -> bool:
        """Hard delete of the storefront product only; admin copy and logs stay."""
        pid = product_id_for(_require_id(product_id))
        deleted = self.store.delete_document(PRODUCTS, pid)
        log.info("remove.done product=%s deleted=%s", pid, deleted)
        return deleted

    def update_pricing(
        self,
        product_id: str,
        new_price: Any,
        markup: Any = None,
    ) -> Dict[str, Any]:
        """
        Sets the selling price. With a markup (percent), the stored price is
        new_price * (1 + markup / 100), rounded to cents.
        """
        pid = product_id_for(_require_id(product_id))
        base = _parse_money(new_price, "price", ceiling=MAX_PRICE)
        markup_pct: Optional[Decimal] = None
        price = base
        if markup not in (None, ""):
            markup_pct = _parse_money(markup, "markup", ceiling=MAX_MARKUP)
            price = (base * (Decimal("1") + markup_pct / Decimal("100"))).quantize(
                _CENTS, rounding=ROUND_HALF_UP
            )
            if price > MAX_PRICE:
                raise ValidationError(f"price with markup must not exceed {MAX_PRICE}")

        if self.store.get_document(PRODUCTS, pid) is None:
            raise ProductNotFound(f"Product {pid} not found")

        now = timezone.now()
        changes = {
            "price": price,
            "markup_percent": markup_pct,
            "updated_at": now,
            "last_updated": now,
        }
        batch = self.store.batch()
        batch.update(PRODUCTS, pid, changes)
        if self.store.get_document(ADMIN_PRODUCTS, pid) is not None:
            batch.merge(ADMIN_PRODUCTS, pid, changes)
        batch.commit()

        log.info("pricing.done product=%s price=%s markup=%s", pid, price, markup_pct)
        return self.store.get_document(PRODUCTS, pid)

    def sync_products(
        self,
        *,
        category: Optional[str] = None,
        limit: int = 100,
        performed_by: str = PERFORMED_BY_SYSTEM,
    ) -> Dict[str, Any]:
        """
        Bulk pull of one catalog page: new products are created, known ones
        overwritten, admin copies merged. Bad rows are counted and skipped.
        """
        self.client.ensure_configured()
        page = self.client.fetch_products(category=category or None, limit=clamp_limit(limit))
        raws = page["items"]

        counts = {"synced": 0, "updated": 0, "failed": 0}
        first_error: Optional[str] = None
        batch = self.store.batch(autoflush=True)
        now = timezone.now()

        log.info("bulk_sync.start category=%s limit=%s items=%s", category, limit, len(raws))
        for raw in raws:
            try:
                record = to_product_record(raw)
                exists = self.store.get_document(PRODUCTS, record["id"]) is not None
                batch.set(PRODUCTS, record["id"], {**record, "last_updated": now})
                batch.merge(
                    ADMIN_PRODUCTS,
                    record["id"],
                    {**record, **admin_fields(record), "last_updated": now, "synced_at": now},
                )
                counts["updated" if exists else "synced"] += 1
            except ValidationError as e:
                counts["failed"] += 1
                if first_error is None:
                    first_error = f"{type(e).__name__}: {e}"
                log.warning("bulk_sync.item_failed err=%s", e)

        batch.commit()

        self.store.add_document(
            SYNC_LOGS,
            {
                "log_type": SyncLog.TYPE_BULK_SYNC,
                "synced_count": counts["synced"],
                "successful_updates": counts["updated"],
                "failed_updates": counts["failed"],
                "total_processed": len(raws),
                "category": category or "all",
                "performed_by": performed_by,
                "details": {"first_error": first_error or ""},
                "timestamp": timezone.now(),
            },
        )
        log.info("bulk_sync.end counts=%s first_error=%s", counts, first_error)
        return {
            "success": True,
            "synced_count": counts["synced"],
            "updated_count": counts["updated"],
            "failed_count": counts["failed"],
            "total_processed": len(raws),
        }


def _require_id(value: Any) -> str:
    text = str(value if value is not None else "").strip()
    if not text:
        raise ValidationError("Product ID is required")
    return text


def _parse_money(value: Any, label: str, *, ceiling: Decimal) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a number")
    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite() or amount < 0:
            raise ValidationError(f"{label} must be a non-negative number")
        if amount > ceiling:
            raise ValidationError(f"{label} must not exceed {ceiling}")
        return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{label} must be a number") from None
