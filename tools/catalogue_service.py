"""Catalogue reads over the content store, wrapped for instrumentation."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from logic.catalogue_filters import FilterState, apply_filters, compute_facet_counts
from logic.validation import CatalogueQuery
from models.product import Product, load_catalogue
from tools.content_store import ContentStore
from tools.observability import instrument_operation

PRODUCTS_KEY = "products"
COLLECTIONS_KEY = "collections"


class CatalogueService:
    """Thin wrapper exposing filtered catalogue views from stored content."""

    def __init__(self, store: ContentStore) -> None:
        self.store = store

    def load_products(self) -> List[Product]:
        """Parse the stored catalogue; a missing entry is an empty catalogue."""

        return load_catalogue(self.store.get(PRODUCTS_KEY) or [])

    def load_collections(self) -> Optional[List[str]]:
        raw = self.store.get(COLLECTIONS_KEY)
        if not raw:
            return None
        names = []
        for entry in raw:
            name = entry.get("name") if isinstance(entry, dict) else entry
            if name:
                names.append(str(name))
        return names

    def find_product(self, product_id: str) -> Optional[Product]:
        for product in self.load_products():
            if product.id == product_id:
                return product
        return None

    @instrument_operation("browse_catalogue", input_model=CatalogueQuery)
    def browse(
        self,
        group: Optional[str] = None,
        category: Optional[List[str]] = None,
        gender: Optional[List[str]] = None,
        bestsellers_only: bool = False,
        sort: str = "default",
    ) -> Dict[str, Any]:
        products = self.load_products()
        state = FilterState(
            group=group,
            category=frozenset(category or []),
            gender=frozenset(gender or []),
            bestsellers_only=bestsellers_only,
        )
        visible = apply_filters(products, state, sort)
        facets = compute_facet_counts(products, state, self.load_collections())
        return {
            "products": [product.to_payload() for product in visible],
            "total": len(visible),
            "facets": facets.to_payload(),
        }


__all__ = ["CatalogueService", "PRODUCTS_KEY", "COLLECTIONS_KEY"]
