# providers/services/factory.py
from __future__ import annotations

from typing import Any, Dict, Optional

from django.conf import settings

from providers.adapters.bigbuy import BigBuyAdapter
from providers.services.importer import CatalogImporter
from providers.services.stock import StockSynchronizer
from providers.services.store import ProductStore


def bigbuy_credentials(**overrides: Any) -> Dict[str, Any]:
    """Credentials come from settings (env / secret), never from the database."""
    creds = {
        "api_key": getattr(settings, "BIGBUY_API_KEY", ""),
        "api_base": getattr(settings, "BIGBUY_API_URL", BigBuyAdapter.DEFAULT_BASE),
        "api_timeout": getattr(settings, "BIGBUY_TIMEOUT_S", BigBuyAdapter.DEFAULT_TIMEOUT),
        "stock_timeout": getattr(
            settings, "BIGBUY_STOCK_TIMEOUT_S", BigBuyAdapter.DEFAULT_STOCK_TIMEOUT
        ),
    }
    creds.update(overrides)
    return creds


def get_adapter(**overrides: Any) -> BigBuyAdapter:
    return BigBuyAdapter(credentials=bigbuy_credentials(**overrides))


def get_stock_synchronizer(
    *, client: Optional[BigBuyAdapter] = None, store: Optional[ProductStore] = None
) -> StockSynchronizer:
    return StockSynchronizer(
        client=client or get_adapter(),
        store=store or ProductStore(),
        chunk_size=getattr(settings, "BIGBUY_SYNC_CHUNK_SIZE", 10),
        delay_s=getattr(settings, "BIGBUY_SYNC_CHUNK_DELAY_S", 1.0),
    )


def get_importer(
    *, client: Optional[BigBuyAdapter] = None, store: Optional[ProductStore] = None
) -> CatalogImporter:
    return CatalogImporter(client=client or get_adapter(), store=store or ProductStore())
