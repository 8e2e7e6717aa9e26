# src/prodash/storage/local_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Well-known keys. One JSON document per key.
KEY_SESSION = "user"
KEY_TASKS = "tasks"
KEY_NOTES = "notes"
KEY_CHAT = "chat_messages"
KEY_PREFERENCES = "user_settings"
KEY_CREDENTIAL = "openai_api_key"

ALL_KEYS: tuple[str, ...] = (
    KEY_SESSION,
    KEY_PREFERENCES,
    KEY_TASKS,
    KEY_NOTES,
    KEY_CHAT,
    KEY_CREDENTIAL,
)


class CorruptValueError(ValueError):
    """The stored text under a key is not valid JSON."""

    def __init__(self, key: str, cause: Exception) -> None:
        super().__init__(f"Stored value for key {key!r} is not valid JSON: {cause}")
        self.key = key


class LocalStore:
    """
    Durable key -> JSON document store (the local-storage of the dashboard).

    Contract:
    - read(key)   -> parsed JSON value, or None when the key is absent
    - write(key)  -> unconditional overwrite of the whole document
    - remove(key) -> delete; no-op when absent

    No transactions across keys, no versioning, no shape migrations.
    Each method opens its own SQLite connection.
    """

    def __init__(self, db_path: str | Path = "local_store.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("LocalStore ready db=%s keys=%s", self._db_path, len(self.keys()))

    @property
    def path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def read_raw(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return None if row is None else str(row[0])
        finally:
            conn.close()

    def read(self, key: str) -> Any | None:
        raw = self.read_raw(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptValueError(key, e) from e

    def write(self, key: str, value: Any) -> None:
        text = json.dumps(value, ensure_ascii=False)
        self.write_raw(key, text)

    def write_raw(self, key: str, text: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, text, time.time()),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("LocalStore write key=%s bytes=%d", key, len(text))

    def remove(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()
        logger.debug("LocalStore remove key=%s", key)

    def keys(self) -> list[str]:
        conn = self._get_conn()
        try:
            return [str(r[0]) for r in conn.execute("SELECT key FROM kv ORDER BY key").fetchall()]
        finally:
            conn.close()

    def clear(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.remove(key)
