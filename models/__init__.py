"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.product import Color, Product, ProductSize, from_raw_product, load_catalogue
from models.quote import Customization, MergeKey, QuoteItem, UniqueKey

__all__ = [
    "Color",
    "Customization",
    "MergeKey",
    "Product",
    "ProductSize",
    "QuoteItem",
    "UniqueKey",
    "from_raw_product",
    "load_catalogue",
]
