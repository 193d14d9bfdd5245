# providers/mapping.py
"""
BigBuy payload -> internal record shapes.

Everything here is pure: no I/O, no clock. Raw payloads are duck-typed JSON,
so every field is read with an explicit default instead of being trusted.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from catalog.models import (
    MAX_PRICE,
    MAX_STOCK,
    MAX_WEIGHT,
    ORIGIN_BIGBUY,
    STATUS_ACTIVE,
    STATUS_INACTIVE,
)
from catalog.utils import slugify_name
from providers.errors import ValidationError

ID_PREFIX = "bigbuy-"
META_DESCRIPTION_LEN = 160
DEFAULT_TAGS = ("premium", "quality")

_CENTS = Decimal("0.01")
_GRAMS = Decimal("0.001")
_INT_BOUND = Decimal(MAX_STOCK)


# -----------------------------
# ids
# -----------------------------
def product_id_for(external_id) -> str:
    ext = str(external_id or "").strip()
    if not ext:
        raise ValidationError("BigBuy product id is required")
    if ext.startswith(ID_PREFIX):
        return ext
    return f"{ID_PREFIX}{ext}"


def external_id_for(product_id: str) -> str:
    pid = str(product_id or "").strip()
    return pid[len(ID_PREFIX):] if pid.startswith(ID_PREFIX) else pid


def clamp_stock(value: int) -> int:
    """Stock fits a PositiveIntegerField: 0 ..= MAX_STOCK."""
    return min(MAX_STOCK, max(0, int(value)))


# -----------------------------
# records
# -----------------------------
def to_product_record(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Turn a raw BigBuy product (list row or detail) into the product record:
      numeric strings that fail to parse become 0,
      absent optional numerics stay None,
      missing nested category/subcategory/brand become "".
    """
    if not isinstance(raw, Mapping):
        raise ValidationError("BigBuy product payload must be an object")

    external_id = str(raw.get("id") if raw.get("id") is not None else "").strip()
    if not external_id:
        raise ValidationError("BigBuy product payload has no id")

    images = _image_urls(raw.get("images"))
    stock = clamp_stock(_to_int(raw.get("stock")))
    active = raw.get("active") is not False
    price_source = raw.get("retailPrice")
    if _is_blank(price_source):
        price_source = raw.get("price")
    wholesale_source = raw.get("wholesalePrice")
    if _is_blank(wholesale_source):
        wholesale_source = raw.get("wholeSalePrice")

    return {
        "id": product_id_for(external_id),
        "external_id": external_id,
        "origin": ORIGIN_BIGBUY,
        "name": _to_str(raw.get("name")),
        "description": _to_str(raw.get("description")),
        "short_description": _to_str(raw.get("shortDescription")),
        "price": _to_decimal(price_source),
        "original_price": _optional_decimal(raw.get("originalPrice")),
        "wholesale_price": _optional_decimal(wholesale_source),
        "category": _nested_name(raw.get("category")),
        "subcategory": _nested_name(raw.get("subcategory")),
        "brand": _nested_name(raw.get("brand")),
        "images": images,
        "thumbnail": images[0] if images else "",
        "stock": stock,
        "in_stock": stock > 0,
        "active": active,
        "status": STATUS_ACTIVE if active else STATUS_INACTIVE,
        "weight": _optional_decimal(raw.get("weight"), quantum=_GRAMS, ceiling=MAX_WEIGHT),
        "dimensions": _dimensions(raw.get("dimensions")),
        "sku": _to_str(raw.get("sku")) or external_id,
        "ean": _to_str(raw.get("ean")),
        "attributes": dict(raw.get("attributes")) if isinstance(raw.get("attributes"), Mapping) else {},
        "variations": list(raw.get("variations")) if isinstance(raw.get("variations"), list) else [],
        "warranty": _to_str(raw.get("warranty")),
        "minimum_order_quantity": max(1, clamp_stock(_to_int(raw.get("minimumOrderQuantity"), 1))),
    }


def admin_fields(record: Mapping[str, Any]) -> Dict[str, Any]:
    """SEO/provenance defaults layered on a product record for the admin copy."""
    name = record.get("name") or ""
    description = record.get("description") or ""
    return {
        "meta_title": f"{name} - Premium Quality",
        "meta_description": description[:META_DESCRIPTION_LEN],
        "slug": slugify_name(name),
        "image_alt": name,
        "tags": list(DEFAULT_TAGS),
        "featured": False,
        "sustainable": False,
        "vegan": False,
        "cruelty_free": False,
        "origin": ORIGIN_BIGBUY,
    }


def to_category(raw: Mapping[str, Any]) -> Dict[str, Any]:
    parent = raw.get("parentId")
    return {
        "id": _to_str(raw.get("id")),
        "name": _to_str(raw.get("name")),
        "parent_id": _to_str(parent) or None,
        "has_children": bool(raw.get("hasChildren")),
    }


def to_preview(record: Mapping[str, Any]) -> Dict[str, Any]:
    """JSON-safe copy of a record (Decimals as strings) for API responses."""
    out: Dict[str, Any] = {}
    for k, v in record.items():
        if isinstance(v, Decimal):
            out[k] = str(v)
        elif hasattr(v, "isoformat"):
            out[k] = v.isoformat()
        else:
            out[k] = v
    return out


# -----------------------------
# Helpers
# -----------------------------
def _is_blank(x) -> bool:
    return x is None or (isinstance(x, str) and not x.strip())


def _to_str(x) -> str:
    if x is None:
        return ""
    return str(x)


def _to_decimal(
    x,
    default: Decimal = Decimal("0"),
    quantum: Decimal = _CENTS,
    ceiling: Decimal = MAX_PRICE,
) -> Decimal:
    """Values that do not fit the column (abs above `ceiling`) count as unparseable."""
    if _is_blank(x) or isinstance(x, bool):
        return default.quantize(quantum)
    try:
        d = Decimal(str(x).strip())
    except (InvalidOperation, ValueError):
        return default.quantize(quantum)
    if not d.is_finite():
        return default.quantize(quantum)
    if abs(d) > ceiling:
        return default.quantize(quantum)
    try:
        return d.quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return default.quantize(quantum)


def _optional_decimal(
    x, quantum: Decimal = _CENTS, ceiling: Decimal = MAX_PRICE
) -> Optional[Decimal]:
    if _is_blank(x):
        return None
    return _to_decimal(x, quantum=quantum, ceiling=ceiling)


def _to_int(x, default: int = 0) -> int:
    if _is_blank(x) or isinstance(x, bool):
        return default
    try:
        return int(str(x).strip())
    except ValueError:
        pass
    try:
        d = Decimal(str(x).strip())
        if not d.is_finite():
            return default
        # "1e30" style values: saturate instead of building a huge int
        return int(max(-_INT_BOUND, min(d, _INT_BOUND)))
    except (InvalidOperation, ValueError):
        return default


def _to_float(x) -> float:
    d = _to_decimal(x, quantum=_GRAMS)
    return float(d)


def _nested_name(value) -> str:
    if isinstance(value, Mapping):
        return _to_str(value.get("name"))
    if isinstance(value, str):
        return value
    return ""


def _image_urls(value) -> List[str]:
    if not isinstance(value, list):
        return []
    urls: List[str] = []
    for img in value:
        if isinstance(img, Mapping):
            url = img.get("url")
        else:
            url = img
        if isinstance(url, str) and url.strip():
            urls.append(url.strip())
    return urls


def _dimensions(value) -> Dict[str, float]:
    if not isinstance(value, Mapping):
        return {}
    return {k: _to_float(value.get(k)) for k in ("length", "width", "height")}
