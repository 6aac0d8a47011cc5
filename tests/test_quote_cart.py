"""Quote cart reducers: merging, personalised lines, removal and size edits."""

from itertools import count
from types import SimpleNamespace

import pytest

from logic import quote_cart
from models.product import Color, Product
from models.quote import Customization, MergeKey, UniqueKey

NAVY = Color("Navy", "#000080")
RED = Color("Red", "#FF0000")


@pytest.fixture
def tee() -> Product:
    return Product(
        id="top-01",
        name="Classic Tee",
        category="Tops",
        category_group="Apparel",
        gender="Unisex",
        available_colors=[NAVY, RED],
    )


@pytest.fixture
def jersey() -> Product:
    return Product(
        id="jersey-01",
        name="Team Jersey",
        category="Custom Jerseys",
        category_group="Apparel",
        gender="Unisex",
        available_colors=[RED],
    )


def _clock(start: int = 1000):
    ticks = count(start)
    return lambda: next(ticks)


def test_add_to_empty_cart_creates_merge_key(tee) -> None:
    items = quote_cart.add_item([], tee, NAVY, {"S": 5})
    assert len(items) == 1
    assert items[0].key == MergeKey("top-01", "Navy")
    assert items[0].quote_item_id == "top-01-Navy"
    assert items[0].is_mergeable


def test_merge_sums_quantities_per_size(tee) -> None:
    items = quote_cart.add_item([], tee, NAVY, {"S": 5})
    items = quote_cart.add_item(items, tee, NAVY, {"S": 3, "M": 2})
    assert len(items) == 1
    assert items[0].size_quantities == {"S": 8, "M": 2}


def test_merge_keeps_position_and_prefers_new_files(tee, jersey) -> None:
    items = quote_cart.add_item([], tee, NAVY, {"S": 1}, logo_file="old.png", design_file="layout.pdf")
    items = quote_cart.add_item(items, jersey, RED, {"M": 1})
    items = quote_cart.add_item(items, tee, NAVY, {"L": 1}, logo_file="new.png")

    assert [item.product.id for item in items] == ["top-01", "jersey-01"]
    assert items[0].logo_file == "new.png"
    assert items[0].design_file == "layout.pdf"


def test_different_colors_stay_separate(tee) -> None:
    items = quote_cart.add_item([], tee, NAVY, {"S": 1})
    items = quote_cart.add_item(items, tee, RED, {"S": 1})
    assert [item.quote_item_id for item in items] == ["top-01-Navy", "top-01-Red"]


def test_customised_jerseys_never_merge(jersey) -> None:
    players = [Customization(name="ALEX", number="10", size="M")]
    items = quote_cart.add_item([], jersey, RED, {"M": 1}, customizations=players, clock=_clock())
    items = quote_cart.add_item(items, jersey, RED, {"M": 1}, customizations=players, clock=_clock())

    assert len(items) == 2
    assert items[0].quote_item_id != items[1].quote_item_id
    assert all(isinstance(item.key, UniqueKey) for item in items)
    assert items[1].quote_item_id == "jersey-01-Red-1001"


def test_jersey_without_customizations_merges(jersey) -> None:
    items = quote_cart.add_item([], jersey, RED, {"M": 1}, customizations=[])
    items = quote_cart.add_item(items, jersey, RED, {"M": 2})
    assert len(items) == 1
    assert items[0].size_quantities == {"M": 3}


def test_add_does_not_mutate_inputs(tee) -> None:
    quantities = {"S": 5}
    original = quote_cart.add_item([], tee, NAVY, quantities)
    snapshot = list(original)
    updated = quote_cart.add_item(original, tee, NAVY, {"S": 1})

    assert original == snapshot
    assert original[0].size_quantities == {"S": 5}
    assert updated is not original
    assert quantities == {"S": 5}


@pytest.mark.parametrize(
    "quantities",
    [{}, {"S": 0}, {"S": 0, "M": 0}, {"S": -1}, {"S": 1.5}, {"S": True}],
)
def test_invalid_quantities_are_rejected(tee, quantities) -> None:
    with pytest.raises(ValueError):
        quote_cart.add_item([], tee, NAVY, quantities)


def test_zero_entries_are_dropped(tee) -> None:
    items = quote_cart.add_item([], tee, NAVY, {"S": 0, "M": 4})
    assert items[0].size_quantities == {"M": 4}


def test_non_mapping_quantities_raise_type_error(tee) -> None:
    with pytest.raises(TypeError):
        quote_cart.add_item([], tee, NAVY, [("S", 1)])


def test_remove_item_and_unknown_id_is_noop(tee) -> None:
    items = quote_cart.add_item([], tee, NAVY, {"S": 1})
    items = quote_cart.add_item(items, tee, RED, {"S": 1})

    assert quote_cart.remove_item(items, "nonexistent-id") == items
    remaining = quote_cart.remove_item(items, "top-01-Navy")
    assert [item.quote_item_id for item in remaining] == ["top-01-Red"]
    assert quote_cart.clear(items) == []


def test_update_size_quantity_sets_and_removes_sizes(tee) -> None:
    items = quote_cart.add_item([], tee, NAVY, {"S": 2, "M": 3, "L": 1})

    updated = quote_cart.update_size_quantity(items, "top-01-Navy", "M", 10)
    assert list(updated[0].size_quantities.items()) == [("S", 2), ("M", 10), ("L", 1)]

    trimmed = quote_cart.update_size_quantity(updated, "top-01-Navy", "S", 0)
    assert trimmed[0].size_quantities == {"M": 10, "L": 1}
    assert items[0].size_quantities == {"S": 2, "M": 3, "L": 1}


def test_update_size_quantity_drops_empty_lines(tee) -> None:
    items = quote_cart.add_item([], tee, NAVY, {"S": 2})
    assert quote_cart.update_size_quantity(items, "top-01-Navy", "S", 0) == []
    with pytest.raises(ValueError):
        quote_cart.update_size_quantity(items, "top-01-Navy", "S", "3")


def test_summary_and_submission_projection(tee, jersey) -> None:
    logo = SimpleNamespace(filename="crest.svg")
    items = quote_cart.add_item([], tee, NAVY, {"S": 2, "M": 3}, logo_file=logo)
    items = quote_cart.add_item(
        items,
        jersey,
        RED,
        {"L": 1},
        customizations=[Customization(name="SAM", number="7", size="L")],
        clock=_clock(),
    )

    assert quote_cart.total_quantity(items[0]) == 5
    assert quote_cart.quote_summary(items) == {"line_items": 2, "total_units": 6}

    submitted = quote_cart.to_submitted_items(items)
    assert submitted[0] == {
        "product": {"id": "top-01", "name": "Classic Tee", "category": "Tops", "categoryGroup": "Apparel"},
        "selectedColor": {"name": "Navy", "hex": "#000080"},
        "sizeQuantities": {"S": 2, "M": 3},
        "logoFilename": "crest.svg",
    }
    assert submitted[1]["customizations"] == [{"name": "SAM", "number": "7", "size": "L"}]
    assert "logoFilename" not in submitted[1]


def test_unique_key_nonce_skips_taken_keys(jersey) -> None:
    players = [Customization(name="A", number="1", size="S")]
    taken = [UniqueKey("jersey-01", "Red", 5), MergeKey("jersey-01", "Red")]
    key = quote_cart.build_key(jersey, RED, players, taken=taken, clock=lambda: 5)
    assert key == UniqueKey("jersey-01", "Red", 6)


def test_dashes_in_ids_and_colours_do_not_merge_lines() -> None:
    polo = Product(id="polo", name="Polo", category="Tops", category_group="Apparel", gender="Unisex")
    polo_navy = Product(id="polo-Navy", name="Polo Navy", category="Tops", category_group="Apparel", gender="Unisex")

    items = quote_cart.add_item([], polo, Color("Navy-Blue"), {"S": 1})
    items = quote_cart.add_item(items, polo_navy, Color("Blue"), {"M": 2})

    assert [(item.product.id, item.size_quantities) for item in items] == [("polo", {"S": 1}), ("polo-Navy", {"M": 2})]
    assert items[0].quote_item_id != items[1].quote_item_id
    assert [item.product.id for item in quote_cart.remove_item(items, items[0].quote_item_id)] == ["polo-Navy"]


def test_plain_line_never_merges_into_personalised_line(jersey) -> None:
    players = [Customization(name="ALEX", number="10", size="S")]
    items = quote_cart.add_item([], jersey, RED, {"S": 1}, customizations=players, clock=lambda: 7)
    items = quote_cart.add_item(items, jersey, Color("Red-7"), {"M": 5})

    assert len(items) == 2
    assert items[0].size_quantities == {"S": 1}
    assert not items[0].is_mergeable
    assert items[1].is_mergeable
    assert items[1].size_quantities == {"M": 5}


def test_mergeable_line_reusing_a_personalised_id_is_rejected(jersey) -> None:
    numbered = Product(id="jersey-01-Red", name="Red Kit", category="Tops", category_group="Apparel", gender="Unisex")
    players = [Customization(name="ALEX", number="10", size="S")]
    items = quote_cart.add_item([], jersey, RED, {"S": 1}, customizations=players, clock=lambda: 7)

    with pytest.raises(ValueError):
        quote_cart.add_item(items, numbered, Color("7"), {"M": 1})
    assert len(items) == 1
