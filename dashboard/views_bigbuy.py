from __future__ import annotations

import json
import logging
from functools import wraps
from typing import Any, Dict

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from providers.errors import (
    ConfigurationError,
    ProductNotFound,
    UpstreamError,
    ValidationError,
)
from providers.mapping import to_preview
from providers.services.factory import get_importer, get_stock_synchronizer
from providers.services.health import ping_provider

from .authz import api_role_required

log = logging.getLogger(__name__)

# error class -> (http status, code); anything else propagates as a 500
_ERROR_MAP = (
    (ValidationError, 400, "invalid-argument"),
    (ProductNotFound, 404, "not-found"),
    (ConfigurationError, 503, "failed-precondition"),
    (UpstreamError, 502, "upstream-error"),
)


def _json_body(request: HttpRequest) -> Dict[str, Any]:
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (TypeError, ValueError):
        raise ValidationError("Request body must be JSON") from None
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _performed_by(request: HttpRequest) -> str:
    return str(request.user.pk)


def bigbuy_api(viewfunc):
    """Maps pipeline errors to JSON responses with a stable `code`."""

    @wraps(viewfunc)
    def _wrapped(request: HttpRequest, *args, **kwargs):
        try:
            return viewfunc(request, *args, **kwargs)
        except (ValidationError, ProductNotFound, ConfigurationError, UpstreamError) as e:
            for cls, status, code in _ERROR_MAP:
                if isinstance(e, cls):
                    break
            if status >= 500:
                log.warning("bigbuy_api.failed view=%s err=%s", viewfunc.__name__, e)
            return JsonResponse({"success": False, "code": code, "error": str(e)}, status=status)

    return _wrapped


# ---------- catalog ----------
@require_POST
@api_role_required("admin")
@bigbuy_api
def search_products(request):
    data = _json_body(request)
    result = get_importer().search_products(
        query=data.get("query") or "",
        category=data.get("category") or "",
        limit=data.get("limit") or 50,
        offset=data.get("offset") or 0,
    )
    return JsonResponse(
        {
            "success": True,
            "products": [to_preview(r) for r in result["items"]],
            "total": result["total"],
            "has_more": result["has_more"],
        }
    )


@require_GET
@api_role_required("admin")
@bigbuy_api
def product_details(request, external_id: str):
    record = get_importer().get_product_details(external_id)
    return JsonResponse({"success": True, "product": to_preview(record)})


@require_GET
@api_role_required("admin")
@bigbuy_api
def categories(request):
    return JsonResponse({"success": True, "categories": get_importer().get_categories()})


@require_GET
@api_role_required("admin")
@bigbuy_api
def imported_ids(request):
    ids = sorted(get_importer().imported_external_ids())
    return JsonResponse({"success": True, "imported": ids})


@require_POST
@api_role_required("admin")
@bigbuy_api
def import_product(request):
    data = _json_body(request)
    record = get_importer().import_product(
        data.get("productId"), performed_by=_performed_by(request)
    )
    return JsonResponse({"success": True, "product": to_preview(record)}, status=201)


@require_POST
@api_role_required("admin")
@bigbuy_api
def remove_product(request, product_id: str):
    deleted = get_importer().remove_product(product_id)
    return JsonResponse({"success": True, "deleted": deleted})


@require_POST
@api_role_required("admin")
@bigbuy_api
def update_pricing(request, product_id: str):
    data = _json_body(request)
    if data.get("price") is None:
        raise ValidationError("price is required")
    doc = get_importer().update_pricing(product_id, data.get("price"), data.get("markup"))
    return JsonResponse({"success": True, "product": to_preview(doc)})


@require_POST
@api_role_required("admin")
@bigbuy_api
def sync_products(request):
    data = _json_body(request)
    result = get_importer().sync_products(
        category=data.get("category") or None,
        limit=data.get("limit") or 100,
        performed_by=_performed_by(request),
    )
    return JsonResponse(result)


# ---------- stock ----------
@require_POST
@api_role_required("admin")
@bigbuy_api
def sync_stock(request):
    data = _json_body(request)
    product_ids = data.get("productIds") or None
    if product_ids is not None and not isinstance(product_ids, list):
        raise ValidationError("productIds must be an array")
    result = get_stock_synchronizer().sync(
        product_ids=product_ids, performed_by=_performed_by(request)
    )
    return JsonResponse(result)


@require_POST
@api_role_required("admin")
@bigbuy_api
def batch_update_stock(request):
    data = _json_body(request)
    result = get_stock_synchronizer().batch_update(
        data.get("productIds"), performed_by=_performed_by(request)
    )
    return JsonResponse(result)


@require_GET
@api_role_required()
@bigbuy_api
def product_stock(request, product_id: str):
    snapshot = get_stock_synchronizer().check_stock(product_id)
    return JsonResponse({"success": True, **snapshot})


@require_GET
@api_role_required("admin")
def ping(request):
    return JsonResponse(ping_provider())
