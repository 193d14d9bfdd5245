from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from celery import shared_task
from django.conf import settings

from catalog.models import ORIGIN_BIGBUY, STATUS_ACTIVE, Product
from providers.errors import ConfigurationError
from providers.models import PERFORMED_BY_SYSTEM, SyncLog
from providers.services.factory import get_importer, get_stock_synchronizer

log = logging.getLogger(__name__)


def _run_scheduled(name: str, job: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    """
    Scheduled jobs never raise to the scheduler: the outcome is returned so
    beat/flower can show it, and failures end up in the log.
    """
    log.info("scheduled.start task=%s", name)
    try:
        result = job()
    except ConfigurationError as e:
        log.warning("scheduled.skipped task=%s reason=%s", name, e)
        return {"status": "skipped", "task": name, "reason": str(e)}
    except Exception as e:
        log.exception("scheduled.failed task=%s", name)
        return {"status": "error", "task": name, "error": f"{type(e).__name__}: {e}"}
    log.info("scheduled.end task=%s", name)
    return {"status": "ok", "task": name, **result}


def _summary(result: Dict[str, Any]) -> Dict[str, Any]:
    # per-product rows stay out of the celery result backend
    return {k: v for k, v in result.items() if k != "results"}


@shared_task
def scheduled_stock_sync() -> Dict[str, Any]:
    """Hourly: active BigBuy products only."""
    return _run_scheduled(
        "scheduled_stock_sync",
        lambda: _summary(
            get_stock_synchronizer().sync(
                active_only=True,
                log_type=SyncLog.TYPE_SCHEDULED_UPDATE,
                performed_by=PERFORMED_BY_SYSTEM,
            )
        ),
    )


@shared_task
def scheduled_full_stock_sync() -> Dict[str, Any]:
    """Daily: every BigBuy product, including inactive ones."""
    return _run_scheduled(
        "scheduled_full_stock_sync",
        lambda: _summary(
            get_stock_synchronizer().sync(
                active_only=False,
                log_type=SyncLog.TYPE_SCHEDULED_UPDATE,
                performed_by=PERFORMED_BY_SYSTEM,
            )
        ),
    )


@shared_task
def scheduled_catalog_refresh(category: str | None = None, limit: int = 100) -> Dict[str, Any]:
    return _run_scheduled(
        "scheduled_catalog_refresh",
        lambda: get_importer().sync_products(
            category=category, limit=limit, performed_by=PERFORMED_BY_SYSTEM
        ),
    )


@shared_task
def scheduled_low_stock_check() -> Dict[str, Any]:
    def _job() -> Dict[str, Any]:
        threshold = int(getattr(settings, "BIGBUY_LOW_STOCK_THRESHOLD", 5))
        low = list(
            Product.objects.filter(
                origin=ORIGIN_BIGBUY, status=STATUS_ACTIVE, stock__lte=threshold
            )
            .order_by("stock", "id")
            .values_list("id", "stock")
        )
        for pid, stock in low:
            log.warning("low_stock product=%s stock=%s threshold=%s", pid, stock, threshold)
        return {"threshold": threshold, "low_stock": len(low)}

    return _run_scheduled("scheduled_low_stock_check", _job)
