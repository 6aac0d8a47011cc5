"""Quote cart persistence per shopper session and a manager applying cart reducers."""
from __future__ import annotations

import contextlib
import json
import re
import sqlite3
import threading
import time
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence
from uuid import uuid4

from logic import quote_cart
from models.product import Color, Product, from_raw_product
from models.quote import Customization, MergeKey, QuoteItem, UniqueKey, handle_name
from tools.observability import instrument_operation

_SESSION_ID_PATTERN = re.compile(r"^[0-9a-fA-F\-]{1,64}$")


def item_to_record(item: QuoteItem) -> Dict[str, Any]:
    """Serialise a line item; file handles are reduced to their names."""

    key: Dict[str, Any] = {"productId": item.key.product_id, "colorName": item.key.color_name}
    if isinstance(item.key, UniqueKey):
        key["nonce"] = item.key.nonce
    return {
        "key": key,
        "product": item.product.to_payload(),
        "selectedColor": item.selected_color.to_payload(),
        "sizeQuantities": dict(item.size_quantities),
        "logoFilename": handle_name(item.logo_file),
        "designFilename": handle_name(item.design_file),
        "customizations": [entry.to_payload() for entry in item.customizations],
    }


def item_from_record(record: Dict[str, Any]) -> QuoteItem:
    raw_key = record["key"]
    if "nonce" in raw_key:
        key = UniqueKey(product_id=raw_key["productId"], color_name=raw_key["colorName"], nonce=int(raw_key["nonce"]))
    else:
        key = MergeKey(product_id=raw_key["productId"], color_name=raw_key["colorName"])
    color = record["selectedColor"]
    return QuoteItem(
        key=key,
        product=from_raw_product(record["product"]),
        selected_color=Color(name=color["name"], hex=color.get("hex", "")),
        size_quantities={str(size): int(qty) for size, qty in record["sizeQuantities"].items()},
        logo_file=record.get("logoFilename"),
        design_file=record.get("designFilename"),
        customizations=[Customization(**entry) for entry in record.get("customizations") or []],
    )


class QuoteSessionStore:
    """Interface for quote cart persistence."""

    def create_session(self, metadata: Dict[str, Any] | None = None) -> str:
        raise NotImplementedError

    def session_exists(self, session_id: str) -> bool:
        raise NotImplementedError

    def load_items(self, session_id: str) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def save_items(self, session_id: str, records: List[Dict[str, Any]]) -> None:
        raise NotImplementedError

    def delete_session(self, session_id: str) -> bool:
        raise NotImplementedError


class JSONQuoteSessionStore(QuoteSessionStore):
    """JSON-file-backed store suitable for local runs."""

    def __init__(self, base_dir: str | Path = "data/quote_sessions") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, session_id: str) -> Path:
        if not _SESSION_ID_PATTERN.match(session_id):
            raise KeyError(f"Unknown session_id {session_id}")
        return self.base_dir / f"{session_id}.json"

    def _load(self, session_id: str) -> Dict[str, Any]:
        path = self._path(session_id)
        if not path.exists():
            raise KeyError(f"Unknown session_id {session_id}")
        return json.loads(path.read_text())

    def _save(self, session_id: str, payload: Dict[str, Any]) -> None:
        self._path(session_id).write_text(json.dumps(payload, indent=2))

    def create_session(self, metadata: Dict[str, Any] | None = None) -> str:
        session_id = str(uuid4())
        self._save(
            session_id,
            {"session_id": session_id, "created_at": time.time(), "metadata": metadata or {}, "items": []},
        )
        return session_id

    def session_exists(self, session_id: str) -> bool:
        return bool(_SESSION_ID_PATTERN.match(session_id)) and self._path(session_id).exists()

    def load_items(self, session_id: str) -> List[Dict[str, Any]]:
        return list(self._load(session_id).get("items", []))

    def save_items(self, session_id: str, records: List[Dict[str, Any]]) -> None:
        payload = self._load(session_id)
        payload["items"] = records
        payload["updated_at"] = time.time()
        self._save(session_id, payload)

    def delete_session(self, session_id: str) -> bool:
        path = self._path(session_id)
        if not path.exists():
            return False
        path.unlink()
        return True


class SQLiteQuoteSessionStore(QuoteSessionStore):
    """SQLite-backed store for lightweight durability."""

    def __init__(self, db_path: str | Path = "data/quote_sessions.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS quote_sessions (
                    session_id TEXT PRIMARY KEY,
                    created_at REAL,
                    updated_at REAL,
                    metadata TEXT,
                    items TEXT
                );
                """
            )

    def create_session(self, metadata: Dict[str, Any] | None = None) -> str:
        session_id = str(uuid4())
        now = time.time()
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO quote_sessions(session_id, created_at, updated_at, metadata, items) VALUES (?, ?, ?, ?, ?)",
                (session_id, now, now, json.dumps(metadata or {}), "[]"),
            )
        return session_id

    def session_exists(self, session_id: str) -> bool:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM quote_sessions WHERE session_id = ? LIMIT 1", (session_id,)
            ).fetchone()
        return row is not None

    def load_items(self, session_id: str) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute("SELECT items FROM quote_sessions WHERE session_id = ?", (session_id,)).fetchone()
        if row is None:
            raise KeyError(f"Unknown session_id {session_id}")
        return json.loads(row["items"]) if row["items"] else []

    def save_items(self, session_id: str, records: List[Dict[str, Any]]) -> None:
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE quote_sessions SET items = ?, updated_at = ? WHERE session_id = ?",
                (json.dumps(records), time.time(), session_id),
            )
            if cursor.rowcount == 0:
                raise KeyError(f"Unknown session_id {session_id}")

    def delete_session(self, session_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM quote_sessions WHERE session_id = ?", (session_id,))
            return cursor.rowcount > 0


class QuoteSessionManager:
    """Loads a session's cart, applies one reducer and stores the result.

    Each load/apply/save cycle holds a per-session lock, so concurrent requests
    for the same session within one process never overwrite each other.
    """

    def __init__(self, store: QuoteSessionStore) -> None:
        self.store = store
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @contextlib.contextmanager
    def _lock(self, session_id: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault(session_id, threading.Lock())
        with lock:
            yield

    def start_session(self, metadata: Dict[str, Any] | None = None) -> str:
        return self.store.create_session(metadata=metadata)

    def _load(self, session_id: str) -> List[QuoteItem]:
        return [item_from_record(record) for record in self.store.load_items(session_id)]

    def get_items(self, session_id: str) -> List[QuoteItem]:
        with self._lock(session_id):
            return self._load(session_id)

    def _save(self, session_id: str, items: Sequence[QuoteItem]) -> List[QuoteItem]:
        self.store.save_items(session_id, [item_to_record(item) for item in items])
        return list(items)

    @instrument_operation("quote_session_add_item")
    def add_item(
        self,
        session_id: str,
        product: Product,
        color: Color,
        size_quantities: Dict[str, int],
        logo_file: Any = None,
        design_file: Any = None,
        customizations: Optional[Sequence[Customization]] = None,
    ) -> List[QuoteItem]:
        with self._lock(session_id):
            items = quote_cart.add_item(
                self._load(session_id),
                product,
                color,
                size_quantities,
                logo_file=logo_file,
                design_file=design_file,
                customizations=customizations,
            )
            return self._save(session_id, items)

    @instrument_operation("quote_session_remove_item")
    def remove_item(self, session_id: str, quote_item_id: str) -> List[QuoteItem]:
        with self._lock(session_id):
            return self._save(session_id, quote_cart.remove_item(self._load(session_id), quote_item_id))

    @instrument_operation("quote_session_update_size")
    def update_size_quantity(self, session_id: str, quote_item_id: str, size: str, quantity: int) -> List[QuoteItem]:
        with self._lock(session_id):
            items = quote_cart.update_size_quantity(self._load(session_id), quote_item_id, size, quantity)
            return self._save(session_id, items)

    def clear(self, session_id: str) -> List[QuoteItem]:
        with self._lock(session_id):
            return self._save(session_id, quote_cart.clear(self._load(session_id)))


__all__ = [
    "QuoteSessionStore",
    "JSONQuoteSessionStore",
    "SQLiteQuoteSessionStore",
    "QuoteSessionManager",
    "item_to_record",
    "item_from_record",
]
