# dashboard/authz.py
from __future__ import annotations

from functools import wraps
from typing import Iterable, Optional, Union

from django.http import HttpRequest, HttpResponse, JsonResponse

RolesArg = Union[str, Iterable[str]]


def _normalize_roles(roles: RolesArg) -> set[str]:
    if isinstance(roles, str):
        roles_iter = [roles]
    else:
        roles_iter = roles
    return {r.strip().lower() for r in roles_iter if r and str(r).strip()}


def user_has_any_role(user, roles: set[str]) -> bool:
    if not (user and user.is_authenticated and user.is_active):
        return False
    if getattr(user, "is_superuser", False):
        return True
    # optional pseudo-role: "staff" matches Django staff users
    if "staff" in roles and getattr(user, "is_staff", False):
        return True
    user_groups = {g.name.lower() for g in user.groups.all()}
    return not roles.isdisjoint(user_groups)


def _denied(status: int, code: str, message: str) -> JsonResponse:
    return JsonResponse({"success": False, "code": code, "error": message}, status=status)


def api_role_required(roles: Optional[RolesArg] = None):
    """
    JSON flavour of role checks for the admin API. Runs before the view body,
    so a rejected caller never triggers an upstream call.

    Usage:
      @api_role_required()           # any authenticated user
      @api_role_required("admin")
      @api_role_required(["admin", "editor"])
    """
    normalized = _normalize_roles(roles) if roles else set()

    def decorator(viewfunc):
        @wraps(viewfunc)
        def _wrapped(request: HttpRequest, *args, **kwargs) -> HttpResponse:
            user = request.user
            if not (user and user.is_authenticated and user.is_active):
                return _denied(401, "unauthenticated", "Authentication required")
            if normalized and not user_has_any_role(user, normalized):
                return _denied(403, "permission-denied", "Admin access required")
            return viewfunc(request, *args, **kwargs)

        return _wrapped

    return decorator
