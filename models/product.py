"""Catalogue product data model and helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from models.taxonomy import validate_gender

LOGGER = logging.getLogger(__name__)


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


@dataclass(frozen=True)
class Color:
    """A colour option, e.g. ``Color("Navy", "#000080")``."""

    name: str
    hex: str = ""

    def to_payload(self) -> Dict[str, str]:
        return {"name": self.name, "hex": self.hex}


@dataclass(frozen=True)
class ProductSize:
    name: str
    width: float = 0.0
    length: float = 0.0


@dataclass
class Product:
    """Represents a single product in the catalogue."""

    id: str
    name: str
    category: str
    category_group: str
    gender: str
    is_bestseller: bool = False
    display_order: float = 0
    price: Optional[float] = None
    available_colors: List[Color] = field(default_factory=list)
    available_sizes: List[ProductSize] = field(default_factory=list)
    image_urls: Dict[str, List[str]] = field(default_factory=dict)
    description: str = ""
    moq: Optional[int] = None
    material_id: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.id = str(self.id).strip()
        if not self.id:
            raise ValueError("Product id must be a non-empty string")
        self.category = str(self.category or "").strip()
        self.category_group = str(self.category_group or "").strip()
        if not self.category or not self.category_group:
            raise ValueError(f"Product '{self.id}' needs a category and a category group")
        self.gender = validate_gender(self.gender)
        self.is_bestseller = bool(self.is_bestseller)
        self.display_order = float(self.display_order or 0)
        if self.price is not None:
            self.price = float(self.price)

    def color(self, name: str) -> Optional[Color]:
        """Return the available colour called ``name``, if any."""

        for color in self.available_colors:
            if color.name == name:
                return color
        return None

    def to_payload(self) -> Dict[str, Any]:
        """Render the camelCase record stored in the content store."""

        payload: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "categoryGroup": self.category_group,
            "gender": self.gender,
            "isBestseller": self.is_bestseller,
            "displayOrder": self.display_order,
            "price": self.price,
            "availableColors": [color.to_payload() for color in self.available_colors],
            "availableSizes": [
                {"name": size.name, "width": size.width, "length": size.length} for size in self.available_sizes
            ],
            "imageUrls": {key: list(urls) for key, urls in self.image_urls.items()},
            "description": self.description,
            "tags": list(self.tags),
        }
        if self.moq is not None:
            payload["moq"] = self.moq
        if self.material_id:
            payload["materialId"] = self.material_id
        return payload

    def summary_payload(self) -> Dict[str, str]:
        """The reduced product record carried by submitted quotes."""

        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "categoryGroup": self.category_group,
        }


def _parse_color(raw: Any) -> Color:
    if isinstance(raw, Color):
        return raw
    if isinstance(raw, dict):
        return Color(name=str(raw.get("name", "")).strip(), hex=str(raw.get("hex", "")))
    return Color(name=str(raw).strip())


def _parse_size(raw: Any) -> ProductSize:
    if isinstance(raw, dict):
        return ProductSize(
            name=str(raw.get("name", "")),
            width=float(raw.get("width") or 0),
            length=float(raw.get("length") or 0),
        )
    return ProductSize(name=str(raw))


def from_raw_product(record: Dict[str, Any]) -> Product:
    """Factory to build a :class:`Product` from a stored camelCase record."""

    required_fields = ["id", "name", "category", "categoryGroup", "gender"]
    missing = [key for key in required_fields if not record.get(key)]
    if missing:
        raise ValueError(f"Missing required fields for Product: {missing}")

    raw_images = record.get("imageUrls") or {}
    return Product(
        id=str(record["id"]),
        name=str(record["name"]),
        category=str(record["category"]),
        category_group=str(record["categoryGroup"]),
        gender=str(record["gender"]),
        is_bestseller=bool(record.get("isBestseller", False)),
        display_order=record.get("displayOrder") or 0,
        price=record.get("price", record.get("basePrice")),
        available_colors=[_parse_color(color) for color in _ensure_list(record.get("availableColors"))],
        available_sizes=[_parse_size(size) for size in _ensure_list(record.get("availableSizes"))],
        image_urls={str(key): _ensure_list(urls) for key, urls in raw_images.items()},
        description=str(record.get("description") or ""),
        moq=int(record["moq"]) if record.get("moq") else None,
        material_id=record.get("materialId"),
        tags=[str(tag) for tag in _ensure_list(record.get("tags"))],
    )


def load_catalogue(records: Iterable[Dict[str, Any]] | None) -> List[Product]:
    """Parse stored product records, skipping the ones that fail validation."""

    products: List[Product] = []
    for record in records or []:
        try:
            products.append(from_raw_product(record))
        except (TypeError, ValueError, AttributeError) as exc:
            LOGGER.warning(
                "Skipping malformed product record",
                extra={"product_id": record.get("id") if isinstance(record, dict) else None, "reason": str(exc)},
            )
    return products


__all__ = ["Color", "ProductSize", "Product", "from_raw_product", "load_catalogue"]
