# providers/services/health.py
from __future__ import annotations

from typing import Any, Dict, Optional

from providers.adapters.bigbuy import BigBuyAdapter
from providers.errors import UpstreamError
from providers.services.factory import get_adapter


def ping_provider(adapter: Optional[BigBuyAdapter] = None) -> Dict[str, Any]:
    adapter = adapter or get_adapter()
    if not adapter.is_configured:
        return {"ok": False, "error": "BigBuy API key not configured"}
    # light call: the category tree is one request
    try:
        cats = adapter.fetch_categories()
    except UpstreamError as e:
        return {"ok": False, "error": str(e), "status": e.status}
    return {"ok": True, "categories_found": len(cats)}
