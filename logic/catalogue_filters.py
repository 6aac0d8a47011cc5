"""Deterministic catalogue filtering, sorting and facet counting."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence

from models.product import Product
from models.taxonomy import (
    FILTER_FACETS,
    GENDERS,
    NAVIGATION_FILTER_TYPES,
    collation_key,
    validate_sort_order,
)


@dataclass(frozen=True)
class FilterState:
    """The shopper's current catalogue filter selections."""

    group: Optional[str] = None
    category: FrozenSet[str] = field(default_factory=frozenset)
    gender: FrozenSet[str] = field(default_factory=frozenset)
    bestsellers_only: bool = False

    def __post_init__(self) -> None:
        if self.group is not None and not isinstance(self.group, str):
            raise TypeError("group must be a string or None")
        object.__setattr__(self, "category", frozenset(self.category))
        object.__setattr__(self, "gender", frozenset(self.gender))
        object.__setattr__(self, "bestsellers_only", bool(self.bestsellers_only))

    @classmethod
    def from_navigation(cls, filter_type: str | None, value: str | None) -> "FilterState":
        """Initial state when the shopper arrives from a collection or category link."""

        if not filter_type or not value:
            return cls()
        if filter_type not in NAVIGATION_FILTER_TYPES:
            raise ValueError(f"Unsupported navigation filter '{filter_type}'")
        if filter_type == "group":
            return cls(group=value)
        if filter_type == "category":
            return cls(category=frozenset({value}))
        return cls(gender=frozenset({value}))

    @property
    def is_empty(self) -> bool:
        return self.group is None and not self.category and not self.gender and not self.bestsellers_only


@dataclass(frozen=True)
class FacetOption:
    value: str
    count: int


@dataclass(frozen=True)
class FacetCounts:
    """Per-facet result counts shown beside each filter option."""

    groups: List[FacetOption]
    categories: List[FacetOption]
    genders: List[FacetOption]
    bestsellers: int

    def to_payload(self) -> Dict[str, object]:
        def render(options: List[FacetOption]) -> List[Dict[str, object]]:
            return [{"name": option.value, "count": option.count} for option in options]

        return {
            "groups": render(self.groups),
            "categories": render(self.categories),
            "genders": render(self.genders),
            "bestsellers": self.bestsellers,
        }


def toggle_filter(state: FilterState, facet: str, value: str) -> FilterState:
    """Toggle one facet value.

    Toggling the selected group clears it; any group change resets the
    category selection because categories only make sense within a group.
    """

    if facet not in FILTER_FACETS:
        raise ValueError(f"Unsupported filter facet '{facet}'. Allowed: {list(FILTER_FACETS)}")
    if facet == "group":
        return select_group(state, None if state.group == value else value)
    current: FrozenSet[str] = getattr(state, facet)
    updated = current - {value} if value in current else current | {value}
    return replace(state, **{facet: updated})


def select_group(state: FilterState, group: Optional[str]) -> FilterState:
    return replace(state, group=group, category=frozenset())


def set_bestsellers_only(state: FilterState, enabled: bool) -> FilterState:
    return replace(state, bestsellers_only=bool(enabled))


def clear_filters() -> FilterState:
    return FilterState()


def _check_inputs(products: Sequence[Product], filter_state: FilterState) -> None:
    if not isinstance(products, (list, tuple)):
        raise TypeError(f"products must be a list of Product, got {type(products).__name__}")
    if not isinstance(filter_state, FilterState):
        raise TypeError(f"filter_state must be a FilterState, got {type(filter_state).__name__}")
    for product in products:
        if not isinstance(product, Product):
            raise TypeError(f"products must only contain Product instances, got {type(product).__name__}")


def _matches(
    product: Product,
    state: FilterState,
    *,
    ignore_group: bool = False,
    ignore_category: bool = False,
    ignore_gender: bool = False,
) -> bool:
    if not ignore_group and state.group and product.category_group != state.group:
        return False
    if not ignore_category and state.category and product.category not in state.category:
        return False
    if not ignore_gender and state.gender and product.gender not in state.gender:
        return False
    if state.bestsellers_only and not product.is_bestseller:
        return False
    return True


def _price_ascending(product: Product) -> float:
    return product.price if product.price else math.inf


def _price_descending(product: Product) -> float:
    return product.price if product.price else 0.0


_SORTERS: Dict[str, Callable[[List[Product]], List[Product]]] = {
    "default": lambda items: sorted(items, key=lambda product: product.display_order),
    "name-asc": lambda items: sorted(items, key=lambda product: collation_key(product.name)),
    "price-asc": lambda items: sorted(items, key=_price_ascending),
    # reverse=True keeps equal prices in their original relative order
    "price-desc": lambda items: sorted(items, key=_price_descending, reverse=True),
}


def sort_products(products: Sequence[Product], sort_order: str | None = "default") -> List[Product]:
    """Return a new list ordered by one of the catalogue sort orders."""

    return _SORTERS[validate_sort_order(sort_order)](list(products))


def apply_filters(
    products: Sequence[Product],
    filter_state: FilterState,
    sort_order: str | None = "default",
) -> List[Product]:
    """Filter the catalogue conjunctively across facets, then sort it."""

    _check_inputs(products, filter_state)
    sorter = _SORTERS[validate_sort_order(sort_order)]
    return sorter([product for product in products if _matches(product, filter_state)])


def _count_options(values: Iterable[str], matching: Iterable[str]) -> List[FacetOption]:
    counts: Dict[str, int] = {}
    for value in matching:
        counts[value] = counts.get(value, 0) + 1
    return [FacetOption(value=value, count=counts.get(value, 0)) for value in values]


def compute_facet_counts(
    products: Sequence[Product],
    filter_state: FilterState,
    collections: Optional[Iterable[str]] = None,
) -> FacetCounts:
    """Count results per facet option, ignoring that facet's own selection."""

    _check_inputs(products, filter_state)

    if collections is None:
        collections = {product.category_group for product in products}
    group_names = sorted(set(collections), key=collation_key)
    group_matches = [
        product.category_group
        for product in products
        if _matches(product, filter_state, ignore_group=True, ignore_category=True)
    ]

    categories: List[FacetOption] = []
    if filter_state.group:
        in_group = [product for product in products if product.category_group == filter_state.group]
        category_names = sorted({product.category for product in in_group}, key=collation_key)
        category_matches = [
            product.category for product in in_group if _matches(product, filter_state, ignore_category=True)
        ]
        categories = _count_options(category_names, category_matches)

    gender_matches = [product.gender for product in products if _matches(product, filter_state, ignore_gender=True)]
    bestsellers = sum(
        1 for product in products if product.is_bestseller and _matches(product, filter_state)
    )

    return FacetCounts(
        groups=_count_options(group_names, group_matches),
        categories=categories,
        genders=_count_options(GENDERS, gender_matches),
        bestsellers=bestsellers,
    )


__all__ = [
    "FilterState",
    "FacetOption",
    "FacetCounts",
    "toggle_filter",
    "select_group",
    "set_bestsellers_only",
    "clear_filters",
    "sort_products",
    "apply_filters",
    "compute_facet_counts",
]
