# providers/services/stock.py
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from django.utils import timezone

from catalog.models import ORIGIN_BIGBUY, STATUS_ACTIVE
from providers.errors import ProductNotFound, UpstreamError, ValidationError
from providers.mapping import clamp_stock, external_id_for, product_id_for
from providers.models import PERFORMED_BY_SYSTEM, SyncLog
from providers.services.store import PRODUCTS, SYNC_LOGS, ProductStore

log = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 10
DEFAULT_CHUNK_DELAY_S = 1.0
MAX_BATCH_IDS = 100


def chunked(items: Sequence[Any], size: int) -> List[Sequence[Any]]:
    size = max(1, int(size))
    return [items[i : i + size] for i in range(0, len(items), size)]


class StockSynchronizer:
    """
    Reconciles stored stock against BigBuy for a set of tracked products.

    Candidates are processed in fixed-size chunks: stock fetches inside a
    chunk run concurrently, chunks run one after another with a fixed pause
    in between. A product is written only when its stock changed.
    """

    def __init__(
        self,
        *,
        client,
        store: ProductStore,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        delay_s: float = DEFAULT_CHUNK_DELAY_S,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.store = store
        self.chunk_size = max(1, int(chunk_size))
        self.delay_s = max(0.0, float(delay_s))
        self._sleep = sleep

    # ---------- candidate selection ----------
    def _candidates(
        self,
        product_ids: Optional[Iterable[str]],
        *,
        active_only: bool,
        limit: Optional[int],
    ) -> tuple[List[Dict[str, Any]], List[str]]:
        """Returns (stored products, requested ids that do not exist)."""
        if product_ids is not None:
            wanted = list(dict.fromkeys(product_id_for(pid) for pid in product_ids))
            found = {
                doc["id"]: doc
                for doc in self.store.query_documents(PRODUCTS, id__in=wanted)
            }
            return [found[pid] for pid in wanted if pid in found], [
                pid for pid in wanted if pid not in found
            ]

        lookups: Dict[str, Any] = {"origin": ORIGIN_BIGBUY}
        if active_only:
            lookups["status"] = STATUS_ACTIVE
        docs = self.store.query_documents(PRODUCTS, order_by="id", limit=limit, **lookups)
        return docs, []

    # ---------- fetch ----------
    def _fetch_one(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        external_id = doc.get("external_id") or external_id_for(doc["id"])
        try:
            stock = self.client.fetch_stock(external_id)
            return {"product_id": doc["id"], "ok": True, "quantity": int(stock["quantity"])}
        except Exception as e:
            log.warning(
                "stock_sync.item_failed product=%s err=%s", doc["id"], e, exc_info=False
            )
            return {"product_id": doc["id"], "ok": False, "error": f"{type(e).__name__}: {e}"}

    def _fetch_chunk(self, chunk: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        # fan out within the chunk, join before the next one starts
        with ThreadPoolExecutor(max_workers=len(chunk)) as pool:
            return list(pool.map(self._fetch_one, chunk))

    # ---------- runs ----------
    def sync(
        self,
        *,
        product_ids: Optional[Iterable[str]] = None,
        active_only: bool = False,
        log_type: str = SyncLog.TYPE_BATCH_UPDATE,
        performed_by: str = PERFORMED_BY_SYSTEM,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        # no key: abort before touching the store or the network
        self.client.ensure_configured()

        started = time.monotonic()
        candidates, missing = self._candidates(product_ids, active_only=active_only, limit=limit)
        chunks = chunked(candidates, self.chunk_size)

        log.info(
            "stock_sync.start type=%s candidates=%s missing=%s chunks=%s active_only=%s by=%s",
            log_type,
            len(candidates),
            len(missing),
            len(chunks),
            active_only,
            performed_by,
        )

        counts = {"checked": 0, "updated": 0, "unchanged": 0, "failed": len(missing)}
        results: List[Dict[str, Any]] = [
            {"product_id": pid, "success": False, "error": "Product not found"} for pid in missing
        ]
        batch = self.store.batch(autoflush=True)

        for index, chunk in enumerate(chunks):
            by_id = {doc["id"]: doc for doc in chunk}
            for fetched in self._fetch_chunk(chunk):
                pid = fetched["product_id"]
                if not fetched["ok"]:
                    counts["failed"] += 1
                    results.append({"product_id": pid, "success": False, "error": fetched["error"]})
                    continue

                counts["checked"] += 1
                new_stock = clamp_stock(fetched["quantity"])
                old_stock = by_id[pid].get("stock")
                changed = new_stock != old_stock
                if changed:
                    now = timezone.now()
                    batch.update(
                        PRODUCTS,
                        pid,
                        {
                            "stock": new_stock,
                            "in_stock": new_stock > 0,
                            "updated_at": now,
                            "last_stock_sync": now,
                        },
                    )
                    counts["updated"] += 1
                else:
                    counts["unchanged"] += 1
                results.append(
                    {
                        "product_id": pid,
                        "success": True,
                        "stock": new_stock,
                        "previous_stock": old_stock,
                        "updated": changed,
                    }
                )

            if index + 1 < len(chunks) and self.delay_s:
                self._sleep(self.delay_s)

        batch.commit()

        total = len(candidates) + len(missing)
        self.store.add_document(
            SYNC_LOGS,
            {
                "log_type": log_type,
                "synced_count": counts["checked"],
                "successful_updates": counts["updated"],
                "failed_updates": counts["failed"],
                "total_processed": total,
                "performed_by": performed_by,
                "details": {"unchanged": counts["unchanged"], "chunks": len(chunks)},
                "timestamp": timezone.now(),
            },
        )

        log.info(
            "stock_sync.end type=%s counts=%s duration_ms=%s",
            log_type,
            counts,
            int((time.monotonic() - started) * 1000),
        )
        return {
            "success": True,
            "total_processed": total,
            "checked": counts["checked"],
            "successful_updates": counts["updated"],
            "failed_updates": counts["failed"],
            "unchanged": counts["unchanged"],
            "chunks": len(chunks),
            "results": results,
        }

    def batch_update(
        self, product_ids: Any, *, performed_by: str = PERFORMED_BY_SYSTEM
    ) -> Dict[str, Any]:
        """Admin-supplied id list, capped at MAX_BATCH_IDS per call."""
        if not isinstance(product_ids, (list, tuple)) or not product_ids:
            raise ValidationError("Product IDs array required")
        ids = [str(pid) for pid in product_ids if str(pid or "").strip()]
        if not ids:
            raise ValidationError("Product IDs array required")
        return self.sync(
            product_ids=ids[:MAX_BATCH_IDS],
            log_type=SyncLog.TYPE_BATCH_UPDATE,
            performed_by=performed_by,
        )

    def check_stock(self, product_id: str) -> Dict[str, Any]:
        """
        On-demand single check. Upstream failures propagate. A value that
        differs from the stored one is written back to the product.
        """
        if not str(product_id or "").strip():
            raise ValidationError("Product ID required")
        pid = product_id_for(product_id)
        doc = self.store.get_document(PRODUCTS, pid)
        if doc is None:
            raise ProductNotFound(f"Product {pid} not found")

        external_id = doc.get("external_id") or external_id_for(pid)
        try:
            stock = self.client.fetch_stock(external_id)
        except UpstreamError:
            log.warning("stock_check.failed product=%s", pid)
            raise
        quantity = clamp_stock(stock["quantity"])

        if quantity != doc.get("stock"):
            now = timezone.now()
            self.store.update_document(
                PRODUCTS,
                pid,
                {
                    "stock": quantity,
                    "in_stock": quantity > 0,
                    "updated_at": now,
                    "last_stock_sync": now,
                },
            )
            log.info("stock_check.updated product=%s old=%s new=%s", pid, doc.get("stock"), quantity)

        return {"product_id": pid, "stock": quantity, "available": quantity > 0}
