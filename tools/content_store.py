"""Key-value content storage abstractions with SQLite and JSON implementations."""
from __future__ import annotations

import json
import re
import secrets
import sqlite3
import time
from pathlib import Path
from typing import Any, List, Optional

CREDENTIAL_KEY = "credential"
_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_\-]{1,64}$")


def validate_key(key: str) -> str:
    """Content keys are short identifiers such as ``products`` or ``heroContents``."""

    if not isinstance(key, str) or not _KEY_PATTERN.match(key):
        raise ValueError(f"Invalid content key {key!r}")
    return key


class ContentStore:
    """Persistence interface for site content entries."""

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def put(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError


class SQLiteContentStore(ContentStore):
    """Local SQLite-backed content store."""

    def __init__(self, database_path: str | Path = "data/content.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS content (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL
                );
                """
            )

    def get(self, key: str) -> Optional[Any]:
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM content WHERE key = ?", (validate_key(key),)).fetchone()
        return json.loads(row["value"]) if row else None

    def put(self, key: str, value: Any) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO content(key, value, updated_at) VALUES (?, ?, ?)\n"
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                (validate_key(key), json.dumps(value), time.time()),
            )

    def delete(self, key: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM content WHERE key = ?", (validate_key(key),))
            return cursor.rowcount > 0

    def keys(self) -> List[str]:
        with self._connect() as conn:
            rows = conn.execute("SELECT key FROM content ORDER BY key").fetchall()
        return [row["key"] for row in rows]


class JSONContentStore(ContentStore):
    """One JSON file per key, suitable for local runs."""

    def __init__(self, base_dir: str | Path = "data/content") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.base_dir / f"{validate_key(key)}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        return json.loads(path.read_text())

    def put(self, key: str, value: Any) -> None:
        self._path(key).write_text(json.dumps(value, indent=2))

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    def keys(self) -> List[str]:
        return sorted(path.stem for path in self.base_dir.glob("*.json"))


def _same(left: Any, right: Any) -> bool:
    return secrets.compare_digest(str(left).encode("utf-8"), str(right).encode("utf-8"))


def verify_credentials(store: ContentStore, username: str, password: str) -> bool:
    """Compare submitted credentials with the stored admin pair.

    Raises :class:`LookupError` when no credential has been stored yet.
    """

    stored = store.get(CREDENTIAL_KEY)
    if not stored:
        raise LookupError("No admin credential configured")
    return _same(username, stored.get("username", "")) and _same(password, stored.get("password", ""))


def is_authorised(store: ContentStore, bearer_token: Optional[str]) -> bool:
    """Bearer tokens are the ``username:password`` pair joined by a colon."""

    if not bearer_token:
        return False
    stored = store.get(CREDENTIAL_KEY)
    if not stored:
        return False
    expected = f"{stored.get('username', '')}:{stored.get('password', '')}"
    return _same(bearer_token, expected)


__all__ = [
    "CREDENTIAL_KEY",
    "ContentStore",
    "SQLiteContentStore",
    "JSONContentStore",
    "validate_key",
    "verify_credentials",
    "is_authorised",
]
