"""Evidence ledger: bounded, newest-first, persisted log of proof records.

Every mutation rewrites the full snapshot. Persistence is best-effort: a
failed write is logged and published as a ``persistence_failed`` event, but
the in-memory ledger stays authoritative until the next successful write.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from threading import Lock
from typing import Any

import structlog

from greenloop.core.errors import PersistenceError
from greenloop.core.metrics import (
    greenloop_evidence_added_total,
    greenloop_evidence_cleared_total,
    greenloop_ledger_size,
    greenloop_listener_failures_total,
    greenloop_persistence_failures_total,
)
from greenloop.persistence.snapshot_store import EvidenceSnapshotStore
from greenloop.schemas.v1.evidence import EvidenceRecord
from greenloop.utils.clock import utc_now
from greenloop.utils.hashscan import DEFAULT_HASHSCAN_BASE_URL, resolve_url

logger = structlog.get_logger(__name__)

DEFAULT_MAX_ITEMS = 100
DEFAULT_SOURCE = "Unknown"


class LedgerEventType(StrEnum):
    ADDED = "added"
    CLEARED = "cleared"
    PERSISTENCE_FAILED = "persistence_failed"


@dataclass(frozen=True)
class LedgerEvent:
    type: LedgerEventType
    records: tuple[EvidenceRecord, ...]
    record: EvidenceRecord | None = None
    error: PersistenceError | None = None


LedgerListener = Callable[[LedgerEvent], None]


class EvidenceLedger:
    """Single ledger abstraction shared by every evidence-producing flow."""

    def __init__(
        self,
        store: EvidenceSnapshotStore,
        *,
        max_items: int = DEFAULT_MAX_ITEMS,
        hashscan_base_url: str = DEFAULT_HASHSCAN_BASE_URL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if max_items < 1:
            raise ValueError("max_items must be at least 1")
        self._store = store
        self._max_items = max_items
        self._hashscan_base_url = hashscan_base_url
        self._clock = clock
        self._records: tuple[EvidenceRecord, ...] = ()
        self._listeners: list[LedgerListener] = []
        self._counter = itertools.count(1)
        self._lock = Lock()
        self._persisted = True

    @property
    def max_items(self) -> int:
        return self._max_items

    @property
    def records(self) -> tuple[EvidenceRecord, ...]:
        return self._records

    @property
    def persisted(self) -> bool:
        """False while the last snapshot write failed."""
        return self._persisted

    def __len__(self) -> int:
        return len(self._records)

    def load(self) -> None:
        """Replace in-memory state with the persisted snapshot."""
        loaded = self._store.load()
        with self._lock:
            self._records = tuple(loaded[: self._max_items])
            self._persisted = True
        greenloop_ledger_size.set(len(self._records))
        logger.info("Evidence ledger loaded", records=len(self._records), key=self._store.key)

    def subscribe(self, listener: LedgerListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_evidence(
        self,
        kind: str,
        evidence_id: str,
        label: str,
        metadata: Mapping[str, Any] | None = None,
        source: str = DEFAULT_SOURCE,
    ) -> EvidenceRecord:
        created_at = self._clock()
        with self._lock:
            record = EvidenceRecord(
                id=f"{kind}_{evidence_id}_{int(created_at.timestamp() * 1000)}_{next(self._counter)}",
                kind=kind,
                evidence_id=evidence_id,
                label=label,
                metadata=dict(metadata or {}),
                source=source or DEFAULT_SOURCE,
                timestamp=created_at,
                hashscan_url=resolve_url(kind, evidence_id, self._hashscan_base_url),
            )
            self._records = (record, *self._records)[: self._max_items]
            snapshot = self._records
            failure = self._persist(snapshot)

        greenloop_evidence_added_total.labels(kind=kind).inc()
        greenloop_ledger_size.set(len(snapshot))
        logger.info(
            "Evidence recorded",
            record_id=record.id,
            kind=kind,
            evidence_id=evidence_id,
            source=record.source,
            ledger_size=len(snapshot),
        )

        self._publish(LedgerEvent(type=LedgerEventType.ADDED, records=snapshot, record=record))
        self._publish_failure(failure, snapshot)
        return record

    def clear_evidence(self) -> None:
        with self._lock:
            cleared = len(self._records)
            self._records = ()
            failure = self._persist(())

        greenloop_evidence_cleared_total.inc()
        greenloop_ledger_size.set(0)
        logger.info("Evidence ledger cleared", cleared=cleared)

        self._publish(LedgerEvent(type=LedgerEventType.CLEARED, records=()))
        self._publish_failure(failure, ())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_evidence_by_kind(self, kind: str) -> list[EvidenceRecord]:
        return [record for record in self._records if record.kind == kind]

    def get_evidence_by_source(self, source: str) -> list[EvidenceRecord]:
        return [record for record in self._records if record.source == source]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _persist(self, snapshot: tuple[EvidenceRecord, ...]) -> PersistenceError | None:
        """Write the snapshot; must be called with the lock held."""
        try:
            self._store.save(snapshot)
        except PersistenceError as exc:
            self._persisted = False
            greenloop_persistence_failures_total.labels(operation="save").inc()
            logger.error(
                "Evidence snapshot write failed; in-memory ledger kept",
                error=exc.message,
                error_code=exc.code,
                error_details=exc.details or {},
            )
            return exc
        self._persisted = True
        return None

    def _publish_failure(
        self, failure: PersistenceError | None, snapshot: tuple[EvidenceRecord, ...]
    ) -> None:
        if failure is not None:
            self._publish(
                LedgerEvent(type=LedgerEventType.PERSISTENCE_FAILED, records=snapshot, error=failure)
            )

    def _publish(self, event: LedgerEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                greenloop_listener_failures_total.inc()
                logger.exception("Ledger listener failed", event_type=event.type.value)
