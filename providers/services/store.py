# providers/services/store.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from django.db import models, transaction

from catalog.models import AdminProduct, Product
from providers.errors import BatchLimitExceeded, DocumentNotFound, PersistenceError
from providers.models import SyncLog

log = logging.getLogger(__name__)

PRODUCTS = "products"
ADMIN_PRODUCTS = "admin_products"
SYNC_LOGS = "sync_logs"

COLLECTIONS: Dict[str, type[models.Model]] = {
    PRODUCTS: Product,
    ADMIN_PRODUCTS: AdminProduct,
    SYNC_LOGS: SyncLog,
}

# one commit never carries more than this many writes
MAX_BATCH_WRITES = 100

OP_SET = "set"
OP_UPDATE = "update"
OP_MERGE = "merge"
OP_DELETE = "delete"

Op = Tuple[str, str, str, Dict[str, Any]]


def as_document(obj: models.Model) -> Dict[str, Any]:
    return {f.attname: getattr(obj, f.attname) for f in obj._meta.concrete_fields}


class WriteBatch:
    """
    Accumulates writes and applies them in one transaction on commit().
    With autoflush=False a batch refuses the (max_writes + 1)th write; with
    autoflush=True it commits the full batch and keeps accumulating.
    """

    def __init__(
        self,
        store: "ProductStore",
        *,
        max_writes: int = MAX_BATCH_WRITES,
        autoflush: bool = False,
    ):
        self._store = store
        self._ops: List[Op] = []
        self.max_writes = max_writes
        self.autoflush = autoflush
        self.committed = 0

    def __len__(self) -> int:
        return len(self._ops)

    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        self._queue((OP_SET, collection, doc_id, dict(data)))

    def update(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        self._queue((OP_UPDATE, collection, doc_id, dict(data)))

    def merge(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        self._queue((OP_MERGE, collection, doc_id, dict(data)))

    def delete(self, collection: str, doc_id: str) -> None:
        self._queue((OP_DELETE, collection, doc_id, {}))

    def _queue(self, op: Op) -> None:
        if len(self._ops) >= self.max_writes:
            if not self.autoflush:
                raise BatchLimitExceeded(
                    f"Batch already holds {self.max_writes} writes; commit before adding more"
                )
            self.commit()
        self._ops.append(op)

    def commit(self) -> int:
        if not self._ops:
            return 0
        ops, self._ops = self._ops, []
        with transaction.atomic():
            for op in ops:
                self._store._apply(*op)
        self.committed += len(ops)
        log.debug("store.batch_commit writes=%s", len(ops))
        return len(ops)


class ProductStore:
    """
    Sole writer of products / admin_products / sync_logs for the pipeline.
    Documents are plain dicts keyed by model field names. No version checks:
    the last write wins.
    """

    def batch(self, *, autoflush: bool = False, max_writes: int = MAX_BATCH_WRITES) -> WriteBatch:
        return WriteBatch(self, max_writes=max_writes, autoflush=autoflush)

    # ---------- reads ----------
    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        obj = _model_for(collection).objects.filter(pk=doc_id).first()
        return as_document(obj) if obj else None

    def query_documents(
        self,
        collection: str,
        *,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
        **lookups: Any,
    ) -> List[Dict[str, Any]]:
        qs = _model_for(collection).objects.filter(**lookups)
        if order_by:
            qs = qs.order_by(order_by)
        if limit:
            qs = qs[:limit]
        return [as_document(obj) for obj in qs]

    # ---------- single writes ----------
    def set_document(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        with transaction.atomic():
            self._apply(OP_SET, collection, doc_id, dict(data))

    def update_document(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        with transaction.atomic():
            self._apply(OP_UPDATE, collection, doc_id, dict(data))

    def merge_document(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        with transaction.atomic():
            self._apply(OP_MERGE, collection, doc_id, dict(data))

    def delete_document(self, collection: str, doc_id: str) -> bool:
        deleted, _ = _model_for(collection).objects.filter(pk=doc_id).delete()
        return deleted > 0

    def add_document(self, collection: str, data: Mapping[str, Any]) -> Any:
        model = _model_for(collection)
        return model.objects.create(**_clean(model, data)).pk

    # ---------- op dispatch ----------
    def _apply(self, op: str, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        model = _model_for(collection)
        if op == OP_DELETE:
            model.objects.filter(pk=doc_id).delete()
            return

        fields = _clean(model, data)
        if op == OP_SET:
            # full overwrite of the document, creation time survives
            obj = model(pk=doc_id, **fields)
            if hasattr(obj, "created_at"):
                created = model.objects.filter(pk=doc_id).values_list("created_at", flat=True).first()
                if created:
                    obj.created_at = created
            obj.save()
        elif op == OP_UPDATE:
            if not model.objects.filter(pk=doc_id).update(**fields):
                raise DocumentNotFound(f"{collection}/{doc_id} does not exist")
        elif op == OP_MERGE:
            # only the supplied keys change; everything else on the row is kept
            model.objects.update_or_create(pk=doc_id, defaults=fields)
        else:
            raise PersistenceError(f"Unknown write op '{op}'")


def _model_for(collection: str) -> type[models.Model]:
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise PersistenceError(f"Unknown collection '{collection}'") from None


def _clean(model: type[models.Model], data: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep only real columns; the primary key is addressed separately."""
    names = {f.name for f in model._meta.concrete_fields if not f.primary_key}
    dropped = set(data) - names - {"id", "pk"}
    if dropped:
        log.debug("store.fields_dropped model=%s fields=%s", model.__name__, sorted(dropped))
    return {k: v for k, v in data.items() if k in names}
