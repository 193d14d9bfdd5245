# catalog/utils.py
from __future__ import annotations

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify_name(value: str | None) -> str:
    """
    Lowercase, collapse every run of non [a-z0-9] characters into one hyphen,
    strip leading/trailing hyphens. Not unique: two products can share a slug.
    """
    return _NON_ALNUM.sub("-", (value or "").lower()).strip("-")
