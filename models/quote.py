"""Quote request line items and their identity keys."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from models.product import Color, Product


def _escape_color(color_name: str) -> str:
    # The colour part never contains a raw "-", so the last one in a merge id
    # always separates product id from colour.
    return color_name.replace("%", "%25").replace("-", "%2D")


@dataclass(frozen=True)
class MergeKey:
    """Identity of a mergeable line: one per product and colour."""

    product_id: str
    color_name: str

    @property
    def quote_item_id(self) -> str:
        return f"{self.product_id}-{_escape_color(self.color_name)}"


@dataclass(frozen=True)
class UniqueKey:
    """Identity of a personalised line that must never merge with another."""

    product_id: str
    color_name: str
    nonce: int

    @property
    def quote_item_id(self) -> str:
        return f"{self.product_id}-{_escape_color(self.color_name)}-{self.nonce}"


QuoteItemKey = Union[MergeKey, UniqueKey]


@dataclass(frozen=True)
class Customization:
    """One personalised jersey: player name, number and size."""

    name: str
    number: str
    size: str

    def to_payload(self) -> Dict[str, str]:
        return {"name": self.name, "number": self.number, "size": self.size}


def handle_name(handle: Any) -> Optional[str]:
    """Display name of an opaque file handle, without reading its content."""

    if handle is None:
        return None
    if isinstance(handle, str):
        return handle
    for attribute in ("filename", "name"):
        value = getattr(handle, attribute, None)
        if isinstance(value, str) and value:
            return value
    return None


@dataclass(frozen=True)
class QuoteItem:
    """A product, colour and per-size quantities the customer wants quoted."""

    key: QuoteItemKey
    product: Product
    selected_color: Color
    size_quantities: Dict[str, int]
    logo_file: Any = None
    design_file: Any = None
    customizations: List[Customization] = field(default_factory=list)

    @property
    def quote_item_id(self) -> str:
        return self.key.quote_item_id

    @property
    def is_mergeable(self) -> bool:
        return isinstance(self.key, MergeKey)

    def to_submission(self) -> Dict[str, Any]:
        """Serializable projection sent with a quote; file blobs are reduced to names."""

        payload: Dict[str, Any] = {
            "product": self.product.summary_payload(),
            "selectedColor": self.selected_color.to_payload(),
            "sizeQuantities": dict(self.size_quantities),
        }
        logo_name = handle_name(self.logo_file)
        design_name = handle_name(self.design_file)
        if logo_name:
            payload["logoFilename"] = logo_name
        if design_name:
            payload["designFilename"] = design_name
        if self.customizations:
            payload["customizations"] = [entry.to_payload() for entry in self.customizations]
        return payload


__all__ = [
    "MergeKey",
    "UniqueKey",
    "QuoteItemKey",
    "Customization",
    "QuoteItem",
    "handle_name",
]
