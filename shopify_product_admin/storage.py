"""Storage backends for upsert idempotency records."""

import json
import sqlite3
import time
from abc import ABC, abstractmethod
from typing import Optional


class BaseStorage(ABC):
    """Abstract storage interface."""

    @abstractmethod
    def get(self, key: str) -> Optional[dict]:
        """Get a stored record by key."""

    @abstractmethod
    def set(self, key: str, value: dict) -> None:
        """Store a record by key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a record if present."""


class InMemoryStorage(BaseStorage):
    """In-memory storage for development/testing."""

    def __init__(self):
        self._store: dict[str, dict] = {}

    def get(self, key: str) -> Optional[dict]:
        return self._store.get(key)

    def set(self, key: str, value: dict) -> None:
        self._store[key] = value

    def delete(self, key: str) -> None:
        self._store.pop(key, None)


class SQLiteStorage(BaseStorage):
    """SQLite-based storage for persistence across restarts."""

    def __init__(self, db_path: str = "idempotency.db"):
        self.db_path = db_path
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._init_db()

    def _init_db(self) -> None:
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS idempotency_keys (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                ts REAL NOT NULL
            )
            """
        )
        self._conn.commit()

    def get(self, key: str) -> Optional[dict]:
        row = self._conn.execute(
            "SELECT value, ts FROM idempotency_keys WHERE key = ?",
            (key,),
        ).fetchone()
        if not row:
            return None
        value, ts = row
        return {**json.loads(value), "ts": ts}

    def set(self, key: str, value: dict) -> None:
        record = {k: v for k, v in value.items() if k != "ts"}
        self._conn.execute(
            "INSERT OR REPLACE INTO idempotency_keys (key, value, ts) VALUES (?, ?, ?)",
            (key, json.dumps(record), value.get("ts", time.time())),
        )
        self._conn.commit()

    def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM idempotency_keys WHERE key = ?", (key,))
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()


class IdempotencyStore:
    """
    Remembers which product an idempotency key created.

    A create that fails after the product record exists can be retried
    with the same key; the retry updates the recorded product instead of
    creating a second one.
    """

    def __init__(self, storage: Optional[BaseStorage] = None, ttl_seconds: int = 3600):
        self.storage = storage or InMemoryStorage()
        self.ttl_seconds = ttl_seconds

    def remember(self, key: str, product_id: str) -> None:
        self.storage.set(key, {"product_id": product_id, "ts": time.time()})

    def recall(self, key: str) -> Optional[str]:
        record = self.storage.get(key)
        if not record:
            return None
        if time.time() - record["ts"] > self.ttl_seconds:
            self.storage.delete(key)
            return None
        return record["product_id"]
