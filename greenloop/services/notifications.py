"""Toast notifications for evidence surfacing."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timedelta
from threading import Lock

import structlog

from greenloop.core.metrics import greenloop_toasts_shown_total
from greenloop.schemas.v1.common import ToastVariant
from greenloop.schemas.v1.evidence import EvidenceRecord
from greenloop.schemas.v1.notifications import Toast
from greenloop.services.evidence_ledger import LedgerEvent, LedgerEventType
from greenloop.utils.clock import utc_now
from greenloop.utils.microcopy import (
    describe_evidence,
    evidence_icon,
    evidence_microcopy,
    success_message,
)

logger = structlog.get_logger(__name__)

DEFAULT_TOAST_DURATION_SECONDS = 6.0

ClipboardWriter = Callable[[str], None]


class ToastCenter:
    """Holds visible toasts; each one expires on its own timer."""

    def __init__(
        self,
        *,
        duration_seconds: float = DEFAULT_TOAST_DURATION_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._duration = timedelta(seconds=duration_seconds)
        self._clock = clock
        self._toasts: list[Toast] = []
        self._lock = Lock()

    def push(
        self,
        *,
        title: str,
        description: str,
        variant: ToastVariant = ToastVariant.DEFAULT,
        kind: str | None = None,
        evidence_id: str | None = None,
        hashscan_url: str | None = None,
        source: str | None = None,
        microcopy: str | None = None,
        success_message: str | None = None,
    ) -> Toast:
        now = self._clock()
        toast = Toast(
            toast_id=uuid.uuid4().hex,
            title=title,
            description=description,
            variant=variant,
            kind=kind,
            evidence_id=evidence_id,
            hashscan_url=hashscan_url,
            source=source,
            microcopy=microcopy,
            success_message=success_message,
            created_at=now,
            expires_at=now + self._duration,
        )
        with self._lock:
            self._toasts = [held for held in self._toasts if held.expires_at > now]
            self._toasts.append(toast)
        greenloop_toasts_shown_total.labels(variant=variant.value).inc()
        return toast

    def active(self) -> list[Toast]:
        """Visible toasts, oldest first; expired ones are dropped."""
        now = self._clock()
        with self._lock:
            self._toasts = [toast for toast in self._toasts if toast.expires_at > now]
            return list(self._toasts)

    def get(self, toast_id: str) -> Toast | None:
        return next((toast for toast in self.active() if toast.toast_id == toast_id), None)

    def dismiss(self, toast_id: str) -> bool:
        with self._lock:
            remaining = [toast for toast in self._toasts if toast.toast_id != toast_id]
            dismissed = len(remaining) != len(self._toasts)
            self._toasts = remaining
        return dismissed

    def copy_id(self, toast_id: str, writer: ClipboardWriter) -> bool:
        """Hand the toast's evidence id to a clipboard writer.

        Writer failures are logged, never raised.
        """
        toast = self.get(toast_id)
        if toast is None or not toast.evidence_id:
            return False
        try:
            writer(toast.evidence_id)
        except Exception as exc:
            logger.error("Failed to copy evidence id", toast_id=toast_id, error=str(exc))
            return False
        return True


class EvidenceToastWatcher:
    """Ledger subscriber that turns ledger events into toasts.

    A new-record toast is shown only when the newest record id differs from
    the last one seen, so re-delivered snapshots do not repeat it.
    """

    def __init__(self, toasts: ToastCenter, *, surface_persistence_failures: bool = True) -> None:
        self._toasts = toasts
        self._surface_persistence_failures = surface_persistence_failures
        self._last_seen_id: str | None = None
        self._lock = Lock()

    @property
    def last_seen_id(self) -> str | None:
        return self._last_seen_id

    def __call__(self, event: LedgerEvent) -> None:
        if event.type == LedgerEventType.ADDED:
            self._on_records(event.records)
        elif event.type == LedgerEventType.CLEARED:
            self._toasts.push(
                title="Evidence cleared",
                description="All proof evidence has been removed.",
            )
        elif event.type == LedgerEventType.PERSISTENCE_FAILED and self._surface_persistence_failures:
            self._toasts.push(
                title="Evidence not saved",
                description=(
                    "Proof evidence could not be written to local storage. "
                    "It stays visible for this session only."
                ),
                variant=ToastVariant.WARNING,
            )

    def _on_records(self, records: tuple[EvidenceRecord, ...]) -> None:
        if not records:
            return
        newest = records[0]
        with self._lock:
            if newest.id == self._last_seen_id:
                return
            self._last_seen_id = newest.id

        self._toasts.push(
            title=f"{evidence_icon(newest.kind)} {newest.label}",
            description=describe_evidence(newest.kind, newest.evidence_id, newest.metadata),
            variant=ToastVariant.SUCCESS,
            kind=newest.kind,
            evidence_id=newest.evidence_id,
            hashscan_url=newest.hashscan_url,
            source=newest.source,
            microcopy=evidence_microcopy(newest.kind, newest.metadata),
            success_message=success_message(newest.kind),
        )
