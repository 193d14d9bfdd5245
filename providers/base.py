# providers/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

RawProduct = Mapping[str, Any]  # supplier payload, trusted only after mapping


class BaseProvider(ABC):
    """
    Provider adapters must implement a minimal contract:
    - fetch_products(): one page of raw supplier items plus the upstream total.
    - fetch_product_detail(external_id): a single raw item.
    - fetch_stock(external_id): current quantity for one item.
    - fetch_categories(): raw category rows.
    """

    def __init__(self, credentials: Mapping[str, Any]):
        self.credentials = credentials

    @abstractmethod
    def fetch_products(
        self,
        *,
        query: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Dict[str, Any]:
        """Returns {"items": [raw, ...], "total": int}."""
        raise NotImplementedError

    @abstractmethod
    def fetch_product_detail(self, external_id: str) -> RawProduct:
        raise NotImplementedError

    @abstractmethod
    def fetch_stock(self, external_id: str) -> Dict[str, Any]:
        """Returns {"quantity": int, "status": str | None}."""
        raise NotImplementedError

    @abstractmethod
    def fetch_categories(self) -> List[Mapping[str, Any]]:
        raise NotImplementedError
