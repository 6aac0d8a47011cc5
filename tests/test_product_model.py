"""Product records: parsing, validation and payload rendering."""

import pytest

from models import Color, Product, from_raw_product, load_catalogue
from models.seed_content import DEFAULT_PRODUCTS
from models.taxonomy import validate_gender, validate_sort_order


def test_from_raw_product_parses_storefront_record() -> None:
    product = from_raw_product(
        {
            "id": "cap-01",
            "name": "Snapback",
            "category": "Caps",
            "categoryGroup": "Headwear",
            "gender": "unisex",
            "isBestseller": True,
            "displayOrder": "2",
            "basePrice": "9.5",
            "moq": "25",
            "availableColors": [{"name": "Black", "hex": "#212121"}, "Navy"],
            "availableSizes": [{"name": "One Size", "width": 10}],
            "imageUrls": {"Black": "https://example.invalid/cap.png"},
            "tags": "cap",
        }
    )

    assert product.gender == "Unisex"
    assert product.display_order == 2.0
    assert product.price == 9.5
    assert product.moq == 25
    assert product.available_colors == [Color("Black", "#212121"), Color("Navy")]
    assert product.available_sizes[0].width == 10.0
    assert product.image_urls == {"Black": ["https://example.invalid/cap.png"]}
    assert product.tags == ["cap"]
    assert product.color("Navy") == Color("Navy")
    assert product.color("Pink") is None


def test_missing_required_fields_raise() -> None:
    with pytest.raises(ValueError):
        from_raw_product({"id": "x", "name": "No group", "category": "Tops", "gender": "Men"})


def test_unknown_gender_is_rejected() -> None:
    with pytest.raises(ValueError):
        Product(id="x", name="X", category="Tops", category_group="Apparel", gender="Kids")


def test_payload_round_trips_through_parser() -> None:
    product = from_raw_product(DEFAULT_PRODUCTS[0])
    payload = product.to_payload()
    assert payload["categoryGroup"] == "Apparel"
    assert payload["moq"] == 20
    assert from_raw_product(payload) == product


def test_load_catalogue_skips_malformed_records() -> None:
    products = load_catalogue([DEFAULT_PRODUCTS[0], {"id": "broken"}, "not-a-record", DEFAULT_PRODUCTS[1]])
    assert [product.id for product in products] == ["top-01", "jersey-01"]
    assert load_catalogue(None) == []


def test_seed_catalogue_is_valid() -> None:
    products = load_catalogue(DEFAULT_PRODUCTS)
    assert len(products) == len(DEFAULT_PRODUCTS)
    assert len({product.id for product in products}) == len(products)


def test_taxonomy_validators() -> None:
    assert validate_gender(" WOMEN ") == "Women"
    assert validate_sort_order(None) == "default"
    with pytest.raises(ValueError):
        validate_sort_order("price")
