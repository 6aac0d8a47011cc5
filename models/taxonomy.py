"""Canonical catalogue vocabulary.

This module centralises the labels the catalogue filters, quote cart and
content services agree on: genders, sort orders, filter facets and the
category whose items are personalised per player.
"""

import unicodedata
from typing import List, Tuple

GENDERS: List[str] = ["Men", "Women", "Unisex"]

SORT_ORDERS: Tuple[str, ...] = ("default", "name-asc", "price-asc", "price-desc")
DEFAULT_SORT_ORDER = "default"

FILTER_FACETS: Tuple[str, ...] = ("group", "category", "gender")
NAVIGATION_FILTER_TYPES: Tuple[str, ...] = FILTER_FACETS

CUSTOM_JERSEYS_CATEGORY = "Custom Jerseys"

QUOTE_STATUSES: List[str] = ["New", "Contacted", "In Progress", "Completed", "Cancelled"]


def validate_gender(value: str) -> str:
    """Validate a gender label, accepting any casing.

    Raises a :class:`ValueError` for labels outside :data:`GENDERS`.
    """

    cleaned = str(value or "").strip().lower()
    for gender in GENDERS:
        if gender.lower() == cleaned:
            return gender
    raise ValueError(f"Unsupported gender '{value}'. Allowed: {GENDERS}")


def validate_sort_order(value: str | None) -> str:
    """Validate a sort order, treating ``None`` as the default order."""

    if value is None:
        return DEFAULT_SORT_ORDER
    if value not in SORT_ORDERS:
        raise ValueError(f"Unsupported sort order '{value}'. Allowed: {list(SORT_ORDERS)}")
    return value


def collation_key(value: str) -> Tuple[str, str]:
    """Sort key approximating a locale-aware comparison.

    Accents and case are ignored for the primary comparison; the raw string
    breaks ties so the ordering stays total.
    """

    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return base.casefold(), value


__all__ = [
    "GENDERS",
    "SORT_ORDERS",
    "DEFAULT_SORT_ORDER",
    "FILTER_FACETS",
    "NAVIGATION_FILTER_TYPES",
    "CUSTOM_JERSEYS_CATEGORY",
    "QUOTE_STATUSES",
    "validate_gender",
    "validate_sort_order",
    "collation_key",
]
