"""Ledger snapshot persistence on top of local storage."""

from __future__ import annotations

import json
import time
from collections.abc import Sequence

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from greenloop.core.errors import PersistenceError
from greenloop.core.metrics import greenloop_persistence_failures_total
from greenloop.persistence.local_storage import LocalStorage
from greenloop.schemas.v1.evidence import EvidenceRecord

logger = structlog.get_logger(__name__)

_RECORDS_ADAPTER = TypeAdapter(list[EvidenceRecord])


class EvidenceSnapshotStore:
    """Serializes the whole ledger as a JSON array under one storage key."""

    def __init__(self, storage: LocalStorage, key: str) -> None:
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[EvidenceRecord]:
        """Return persisted records, or an empty list if absent or corrupt."""
        try:
            raw = self._storage.get_item(self._key)
        except Exception as exc:
            greenloop_persistence_failures_total.labels(operation="load").inc()
            logger.warning("Failed to read evidence snapshot", key=self._key, error=str(exc))
            return []

        if raw is None:
            return []

        try:
            return _RECORDS_ADAPTER.validate_json(raw)
        except PydanticValidationError as exc:
            greenloop_persistence_failures_total.labels(operation="load").inc()
            logger.warning(
                "Discarding corrupt evidence snapshot",
                key=self._key,
                error_count=exc.error_count(),
            )
            return []

    def save(self, records: Sequence[EvidenceRecord]) -> None:
        """Write the full collection; raises PersistenceError on any failure."""
        started = time.perf_counter()
        try:
            payload = json.dumps(
                [record.model_dump(mode="json", by_alias=True) for record in records],
                ensure_ascii=False,
            )
        except (TypeError, ValueError) as exc:
            raise PersistenceError(
                "Failed to serialize evidence snapshot",
                key=self._key,
                details={"error": str(exc)},
            ) from exc

        try:
            self._storage.set_item(self._key, payload)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError(
                "Failed to write evidence snapshot",
                key=self._key,
                details={"error": str(exc)},
            ) from exc

        logger.debug(
            "Evidence snapshot saved",
            key=self._key,
            records=len(records),
            elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
        )

    def close(self) -> None:
        self._storage.close()
