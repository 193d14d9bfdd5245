# storefront/views_stock.py
"""
Public stock check used by product pages. No auth, read-only, and the
storefront never sees a 5xx from it: any failure degrades to "out of stock"
with an opaque reference that matches the server log line.
"""
from __future__ import annotations

import logging
import re
import secrets

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from providers.mapping import external_id_for
from providers.services.factory import get_adapter

log = logging.getLogger(__name__)

_PRODUCT_ID_RE = re.compile(r"[A-Za-z0-9_-]+")
_MAX_ID_LEN = 64

_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'none'",
}


def _respond(payload: dict, *, status: int = 200, cache_control: str = "no-store") -> JsonResponse:
    resp = JsonResponse(payload, status=status)
    for k, v in _SECURITY_HEADERS.items():
        resp[k] = v
    resp["Cache-Control"] = cache_control
    return resp


def _unavailable(error: str, *, status: int, product_id: str = "") -> JsonResponse:
    return _respond(
        {
            "error": error,
            "inStock": False,
            "availableQuantity": 0,
            "productId": product_id,
            "timestamp": timezone.now().isoformat(),
        },
        status=status,
    )


def _short(product_id: str) -> str:
    return product_id[:10] + "..." if len(product_id) > 10 else product_id


def check_stock(request: HttpRequest) -> JsonResponse:
    if request.method != "GET":
        return _unavailable("Method not allowed", status=405)

    product_id = request.GET.get("productId") or ""
    if not product_id:
        return _unavailable("Product ID is required", status=400)
    if len(product_id) > _MAX_ID_LEN or not _PRODUCT_ID_RE.fullmatch(product_id):
        return _unavailable("Invalid product ID format", status=400)

    log.info("public_stock.request product=%s", _short(product_id))
    try:
        adapter = get_adapter()
        stock = adapter.fetch_stock(
            external_id_for(product_id),
            timeout=getattr(settings, "BIGBUY_PUBLIC_STOCK_TIMEOUT_S", 5),
        )
        quantity = max(0, int(stock["quantity"]))
        status = stock.get("status")
        in_stock = quantity > 0 and status in (None, "", "active")
    except Exception as e:
        error_id = secrets.token_hex(6)
        log.error(
            "public_stock.failed ref=%s product=%s err=%s", error_id, _short(product_id), e
        )
        return _respond(
            {
                "inStock": False,
                "availableQuantity": 0,
                "productId": product_id,
                "timestamp": timezone.now().isoformat(),
                "error": f"Stock information temporarily unavailable (ref: {error_id})",
                "errorRef": error_id,
            },
            status=200,
        )

    resp = _respond(
        {
            "inStock": in_stock,
            "availableQuantity": quantity,
            "productId": product_id,
            "timestamp": timezone.now().isoformat(),
        },
        cache_control="public, max-age=300, s-maxage=300",
    )
    resp["Vary"] = "Accept, Accept-Encoding"
    return resp
