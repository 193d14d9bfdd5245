from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from providers.base import BaseProvider, RawProduct
from providers.errors import ServiceUnavailable, UpstreamError

log = logging.getLogger(__name__)


# -----------------------------
# BigBuy Adapter
# -----------------------------
class BigBuyAdapter(BaseProvider):
    """
    BigBuy REST catalog client. One request per call, no retries: a failed
    call surfaces as UpstreamError and the caller decides whether to carry on.

    credentials (dict) supports:
      - api_key: str (required for every call)
      - api_base: str (e.g. "https://api.bigbuy.eu/rest")
      - api_timeout: int (seconds)              (default 30)
      - stock_timeout: int (seconds)            (default 15)
    """

    DEFAULT_BASE = "https://api.bigbuy.eu/rest"
    DEFAULT_TIMEOUT = 30
    DEFAULT_STOCK_TIMEOUT = 15
    MAX_PAGE_SIZE = 100  # upstream page-size ceiling

    def __init__(self, *, credentials: Mapping[str, Any]):
        super().__init__(dict(credentials or {}))
        self._api_key: str = str(self.credentials.get("api_key") or "").strip()
        self._timeout = float(self.credentials.get("api_timeout") or self.DEFAULT_TIMEOUT)
        self._stock_timeout = float(
            self.credentials.get("stock_timeout") or self.DEFAULT_STOCK_TIMEOUT
        )

    # ---------- basic config ----------
    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def ensure_configured(self) -> None:
        if not self._api_key:
            raise ServiceUnavailable("BigBuy API key not configured")

    def _base(self) -> str:
        return (self.credentials.get("api_base") or self.DEFAULT_BASE).rstrip("/")

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    # ---------- HTTP helper ----------
    def _http_get(
        self,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        self.ensure_configured()
        url = f"{self._base()}{path}"
        try:
            resp = requests.get(
                url,
                headers=self._headers(),
                params=params or {},
                timeout=timeout or self._timeout,
            )
        except requests.Timeout as e:
            raise UpstreamError(f"BigBuy API timeout: {path}", status=None) from e
        except requests.RequestException as e:
            raise UpstreamError(f"BigBuy API unreachable: {e}", status=None) from e

        if not 200 <= resp.status_code < 300:
            raise UpstreamError(f"BigBuy API error: {resp.status_code}", status=resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError("BigBuy API returned a non-JSON body", status=resp.status_code) from e

    # ---------- catalog ----------
    def fetch_products(
        self,
        *,
        query: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "limit": clamp_limit(limit, self.MAX_PAGE_SIZE),
            "offset": max(0, _to_int(offset)),
        }
        if query:
            params["search"] = query
        if category:
            params["category"] = category

        body = self._http_get("/catalog/products", params=params)
        items = _unwrap_list(body, "data", "products")
        total = body.get("total") if isinstance(body, dict) else None
        return {"items": items, "total": _to_int(total, len(items))}

    def fetch_product_detail(self, external_id: str) -> RawProduct:
        body = self._http_get(f"/catalog/products/{external_id}")
        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            return body["data"]
        if not isinstance(body, dict):
            raise UpstreamError("BigBuy API returned an unexpected product payload")
        return body

    def fetch_stock(self, external_id: str, *, timeout: float | None = None) -> Dict[str, Any]:
        body = self._http_get(
            f"/catalog/products/{external_id}/stock",
            timeout=timeout or self._stock_timeout,
        )
        if not isinstance(body, dict):
            raise UpstreamError("BigBuy API returned an unexpected stock payload")
        raw_qty = body.get("quantity")
        if raw_qty is None:
            raw_qty = body.get("stock")
        return {
            "quantity": max(0, _to_int(raw_qty)),
            "status": body.get("status"),
        }

    def fetch_categories(self) -> List[Mapping[str, Any]]:
        body = self._http_get("/catalog/categories")
        return _unwrap_list(body, "data", "categories")


# -----------------------------
# Helpers (pure functions)
# -----------------------------
def clamp_limit(limit, ceiling: int = BigBuyAdapter.MAX_PAGE_SIZE) -> int:
    return max(1, min(_to_int(limit, ceiling), ceiling))


def _to_int(x, default: int = 0) -> int:
    try:
        if x is None:
            return default
        return int(float(x))
    except (TypeError, ValueError, OverflowError):
        return default


def _unwrap_list(body: Any, *keys: str) -> List[Mapping[str, Any]]:
    """BigBuy answers either with a bare list or {"data": [...]} / {"products": [...]}."""
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        for k in keys:
            value = body.get(k)
            if isinstance(value, list):
                return value
    return []
