"""Quote cart reducers.

Every function takes the current list of :class:`QuoteItem` and returns a new
list; neither the list nor its items are mutated, so callers can detect
changes by identity.
"""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from models.product import Color, Product
from models.quote import Customization, MergeKey, QuoteItem, QuoteItemKey, UniqueKey
from models.taxonomy import CUSTOM_JERSEYS_CATEGORY


def _clean_quantities(size_quantities: Mapping[str, Any]) -> Dict[str, int]:
    if not isinstance(size_quantities, Mapping):
        raise TypeError("size_quantities must be a mapping of size name to quantity")
    cleaned: Dict[str, int] = {}
    for size, quantity in size_quantities.items():
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValueError(f"Quantity for size '{size}' must be an integer, got {quantity!r}")
        if quantity < 0:
            raise ValueError(f"Quantity for size '{size}' cannot be negative")
        if quantity:
            cleaned[str(size)] = quantity
    if not cleaned:
        raise ValueError("A quote item needs at least one size with a positive quantity")
    return cleaned


def _merge_quantities(current: Mapping[str, int], extra: Mapping[str, int]) -> Dict[str, int]:
    merged = dict(current)
    for size, quantity in extra.items():
        merged[size] = merged.get(size, 0) + quantity
    return merged


def is_customized(product: Product, customizations: Optional[Sequence[Customization]]) -> bool:
    """Personalised jerseys are kept as separate lines."""

    return product.category == CUSTOM_JERSEYS_CATEGORY and bool(customizations)


def build_key(
    product: Product,
    color: Color,
    customizations: Optional[Sequence[Customization]],
    taken: Iterable[QuoteItemKey] = (),
    clock: Callable[[], int] = time.time_ns,
) -> QuoteItemKey:
    """Derive the identity of a new line, bumping the nonce past any key or id already in use."""

    if not is_customized(product, customizations):
        return MergeKey(product_id=product.id, color_name=color.name)
    taken_keys = set(taken)
    taken_ids = {existing.quote_item_id for existing in taken_keys}
    key = UniqueKey(product_id=product.id, color_name=color.name, nonce=clock())
    while key in taken_keys or key.quote_item_id in taken_ids:
        key = replace(key, nonce=key.nonce + 1)
    return key


def add_item(
    items: Sequence[QuoteItem],
    product: Product,
    color: Color,
    size_quantities: Mapping[str, int],
    logo_file: Any = None,
    design_file: Any = None,
    customizations: Optional[Sequence[Customization]] = None,
    clock: Callable[[], int] = time.time_ns,
) -> List[QuoteItem]:
    """Add a line to the quote, merging it into the line with the same merge key.

    Raises :class:`ValueError` when a new mergeable line would reuse the id of
    a different line.
    """

    quantities = _clean_quantities(size_quantities)
    key = build_key(product, color, customizations, [item.key for item in items], clock)

    if isinstance(key, MergeKey):
        for index, existing in enumerate(items):
            if existing.key == key:
                merged = replace(
                    existing,
                    size_quantities=_merge_quantities(existing.size_quantities, quantities),
                    logo_file=logo_file if logo_file is not None else existing.logo_file,
                    design_file=design_file if design_file is not None else existing.design_file,
                )
                return [*items[:index], merged, *items[index + 1:]]
            if existing.quote_item_id == key.quote_item_id:
                raise ValueError(f"Quote item id '{key.quote_item_id}' is already used by another line")

    new_item = QuoteItem(
        key=key,
        product=product,
        selected_color=color,
        size_quantities=quantities,
        logo_file=logo_file,
        design_file=design_file,
        customizations=list(customizations or []),
    )
    return [*items, new_item]


def remove_item(items: Sequence[QuoteItem], quote_item_id: str) -> List[QuoteItem]:
    return [item for item in items if item.quote_item_id != quote_item_id]


def clear(items: Sequence[QuoteItem]) -> List[QuoteItem]:
    return []


def update_size_quantity(
    items: Sequence[QuoteItem], quote_item_id: str, size: str, quantity: int
) -> List[QuoteItem]:
    """Set one size's quantity; a line left without sizes is dropped."""

    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValueError(f"Quantity must be an integer, got {quantity!r}")
    updated: List[QuoteItem] = []
    for item in items:
        if item.quote_item_id != quote_item_id:
            updated.append(item)
            continue
        sizes = dict(item.size_quantities)
        if quantity > 0:
            sizes[size] = quantity
        else:
            sizes.pop(size, None)
        if sizes:
            updated.append(replace(item, size_quantities=sizes))
    return updated


def total_quantity(item: QuoteItem) -> int:
    return sum(item.size_quantities.values())


def quote_summary(items: Sequence[QuoteItem]) -> Dict[str, int]:
    return {"line_items": len(items), "total_units": sum(total_quantity(item) for item in items)}


def to_submitted_items(items: Sequence[QuoteItem]) -> List[Dict[str, Any]]:
    return [item.to_submission() for item in items]


__all__ = [
    "add_item",
    "remove_item",
    "clear",
    "update_size_quantity",
    "total_quantity",
    "quote_summary",
    "to_submitted_items",
    "is_customized",
    "build_key",
]
