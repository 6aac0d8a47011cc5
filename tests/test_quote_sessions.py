"""Quote session persistence and the session manager."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from logic import quote_cart
from memory.quote_sessions import (
    JSONQuoteSessionStore,
    QuoteSessionManager,
    SQLiteQuoteSessionStore,
    item_from_record,
    item_to_record,
)
from models.product import from_raw_product
from models.quote import Customization, UniqueKey
from models.seed_content import DEFAULT_PRODUCTS


@pytest.fixture(params=["json", "sqlite"])
def manager(request, tmp_path: Path) -> QuoteSessionManager:
    if request.param == "json":
        store = JSONQuoteSessionStore(base_dir=tmp_path / "sessions")
    else:
        store = SQLiteQuoteSessionStore(db_path=tmp_path / "sessions.db")
    return QuoteSessionManager(store)


@pytest.fixture
def tee():
    return from_raw_product(DEFAULT_PRODUCTS[0])


@pytest.fixture
def jersey():
    return from_raw_product(DEFAULT_PRODUCTS[1])


def test_session_cart_persists_merges(manager, tee) -> None:
    session_id = manager.start_session()
    assert manager.store.session_exists(session_id)
    assert manager.get_items(session_id) == []

    navy = tee.color("Navy")
    manager.add_item(session_id, tee, navy, {"S": 5})
    manager.add_item(session_id, tee, navy, {"S": 3, "M": 2}, logo_file="logo.png")

    items = manager.get_items(session_id)
    assert len(items) == 1
    assert items[0].size_quantities == {"S": 8, "M": 2}
    assert items[0].logo_file == "logo.png"
    assert items[0].product == tee


def test_update_remove_and_clear(manager, tee) -> None:
    session_id = manager.start_session({"source": "test"})
    manager.add_item(session_id, tee, tee.color("White"), {"M": 2})
    manager.add_item(session_id, tee, tee.color("Black"), {"L": 1})

    manager.update_size_quantity(session_id, "top-01-White", "M", 6)
    assert manager.get_items(session_id)[0].size_quantities == {"M": 6}

    manager.remove_item(session_id, "top-01-White")
    assert [item.quote_item_id for item in manager.get_items(session_id)] == ["top-01-Black"]

    manager.clear(session_id)
    assert manager.get_items(session_id) == []


def test_customised_lines_survive_persistence(manager, jersey) -> None:
    session_id = manager.start_session()
    players = [Customization(name="ALEX", number="9", size="M")]
    manager.add_item(session_id, jersey, jersey.color("Red"), {"M": 1}, customizations=players)
    manager.add_item(session_id, jersey, jersey.color("Red"), {"M": 1}, customizations=players)

    items = manager.get_items(session_id)
    assert len(items) == 2
    assert all(isinstance(item.key, UniqueKey) for item in items)
    assert items[0].customizations == players


def test_unknown_session_raises_key_error(manager, tee) -> None:
    assert not manager.store.session_exists("0000-ffff")
    with pytest.raises(KeyError):
        manager.get_items("0000-ffff")
    with pytest.raises(KeyError):
        manager.add_item("0000-ffff", tee, tee.color("Navy"), {"S": 1})


def test_json_store_rejects_path_like_ids(tmp_path: Path) -> None:
    store = JSONQuoteSessionStore(base_dir=tmp_path)
    assert store.session_exists("../etc/passwd") is False
    with pytest.raises(KeyError):
        store.load_items("../etc/passwd")


def test_record_round_trip_keeps_key_and_file_names(jersey) -> None:
    class Upload:
        filename = "crest.svg"

    items = quote_cart.add_item(
        [],
        jersey,
        jersey.color("Blue"),
        {"S": 2},
        logo_file=Upload(),
        customizations=[Customization(name="JO", number="4", size="S")],
        clock=lambda: 42,
    )
    restored = item_from_record(item_to_record(items[0]))

    assert restored.key == UniqueKey("jersey-01", "Blue", 42)
    assert restored.logo_file == "crest.svg"
    assert restored.size_quantities == {"S": 2}


def test_concurrent_adds_to_one_session_are_all_kept(manager, tee) -> None:
    session_id = manager.start_session()
    navy = tee.color("Navy")

    with ThreadPoolExecutor(max_workers=8) as pool:
        for future in [pool.submit(manager.add_item, session_id, tee, navy, {"S": 1}) for _ in range(16)]:
            future.result()

    items = manager.get_items(session_id)
    assert len(items) == 1
    assert items[0].size_quantities == {"S": 16}
