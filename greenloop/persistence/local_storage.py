"""Key/value string storage with browser ``localStorage`` semantics.

Values are opaque strings. ``SqlLocalStorage`` keeps each key in one row of
a SQLAlchemy table, upserted on every change, and enforces a byte quota the
way browsers do.
"""

from __future__ import annotations

import time
from threading import Lock
from typing import Protocol

import structlog
from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table, Text, bindparam, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from greenloop.core.database import create_storage_engine, dispose_engine
from greenloop.core.errors import PersistenceError, StorageQuotaExceededError
from greenloop.core.metrics import greenloop_storage_latency_seconds
from greenloop.utils.clock import utc_now

logger = structlog.get_logger(__name__)

DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024

metadata = MetaData()

local_storage_table = Table(
    "greenloop_local_storage",
    metadata,
    Column("storage_key", String(255), primary_key=True),
    Column("storage_value", Text, nullable=False),
    Column("version", Integer, nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

_SELECT_VALUE = text("""
    SELECT storage_value
    FROM greenloop_local_storage
    WHERE storage_key = :key
""")

_SELECT_OTHERS = text("""
    SELECT storage_key, storage_value
    FROM greenloop_local_storage
    WHERE storage_key <> :key
""")

_UPSERT = text("""
    INSERT INTO greenloop_local_storage
        (storage_key, storage_value, version, updated_at)
    VALUES
        (:key, :value, 1, :updated_at)
    ON CONFLICT (storage_key) DO UPDATE SET
        storage_value = excluded.storage_value,
        version = greenloop_local_storage.version + 1,
        updated_at = excluded.updated_at
""").bindparams(bindparam("updated_at", type_=DateTime(timezone=True)))

_DELETE = text("""
    DELETE FROM greenloop_local_storage
    WHERE storage_key = :key
""")


class LocalStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def close(self) -> None: ...


def _usage_bytes(items: dict[str, str]) -> int:
    return sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in items.items())


class MemoryLocalStorage:
    """In-process storage; contents are lost when the process exits."""

    def __init__(self, quota_bytes: int = DEFAULT_QUOTA_BYTES) -> None:
        self._items: dict[str, str] = {}
        self._quota_bytes = quota_bytes
        self._lock = Lock()

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            candidate = {**self._items, key: value}
            if _usage_bytes(candidate) > self._quota_bytes:
                raise StorageQuotaExceededError(
                    "Local storage quota exceeded",
                    key=key,
                    details={"quota_bytes": self._quota_bytes},
                )
            self._items = candidate

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def close(self) -> None:
        pass


class SqlLocalStorage:
    """Key/value rows in ``greenloop_local_storage`` with versioned upserts.

    The table is created on first use. A database that is unreachable at
    startup is retried on the next operation.
    """

    def __init__(self, engine: Engine, quota_bytes: int = DEFAULT_QUOTA_BYTES) -> None:
        self._engine = engine
        self._quota_bytes = quota_bytes
        self._schema_ready = False

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_item(self, key: str) -> str | None:
        start_time = time.perf_counter()
        try:
            self._ensure_schema()
            with self._engine.connect() as conn:
                row = conn.execute(_SELECT_VALUE, {"key": key}).fetchone()
            return row[0] if row else None
        except SQLAlchemyError as exc:
            raise PersistenceError(
                "Failed to read local storage",
                key=key,
                details={"error": str(exc)},
            ) from exc
        finally:
            greenloop_storage_latency_seconds.labels(operation="get").observe(time.perf_counter() - start_time)

    def set_item(self, key: str, value: str) -> None:
        start_time = time.perf_counter()
        try:
            self._ensure_schema()
            with self._engine.begin() as conn:
                others = {row[0]: row[1] for row in conn.execute(_SELECT_OTHERS, {"key": key})}
                others[key] = value
                if _usage_bytes(others) > self._quota_bytes:
                    raise StorageQuotaExceededError(
                        "Local storage quota exceeded",
                        key=key,
                        details={"quota_bytes": self._quota_bytes},
                    )
                conn.execute(_UPSERT, {"key": key, "value": value, "updated_at": utc_now()})
        except SQLAlchemyError as exc:
            raise PersistenceError(
                "Failed to write local storage",
                key=key,
                details={"error": str(exc)},
            ) from exc
        finally:
            greenloop_storage_latency_seconds.labels(operation="set").observe(time.perf_counter() - start_time)

    def remove_item(self, key: str) -> None:
        start_time = time.perf_counter()
        try:
            self._ensure_schema()
            with self._engine.begin() as conn:
                conn.execute(_DELETE, {"key": key})
        except SQLAlchemyError as exc:
            raise PersistenceError(
                "Failed to remove local storage key",
                key=key,
                details={"error": str(exc)},
            ) from exc
        finally:
            greenloop_storage_latency_seconds.labels(operation="remove").observe(time.perf_counter() - start_time)

    def close(self) -> None:
        dispose_engine(self._engine)

    def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        metadata.create_all(self._engine, checkfirst=True)
        self._schema_ready = True
        logger.debug("Local storage table ready", table=local_storage_table.name)


def create_local_storage(url: str, quota_bytes: int = DEFAULT_QUOTA_BYTES) -> LocalStorage:
    """Database storage when a URL is configured, otherwise in-memory."""
    if url:
        return SqlLocalStorage(create_storage_engine(url), quota_bytes=quota_bytes)
    return MemoryLocalStorage(quota_bytes=quota_bytes)
