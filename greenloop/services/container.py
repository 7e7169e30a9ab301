"""Service wiring for one application instance.

The container owns the single ledger, toast center, inspector and live feed
poller for the app's lifetime. It is built in the FastAPI lifespan and kept
on ``app.state``; tests build their own.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from greenloop.clients.mirror_feed_client import MirrorFeedClient
from greenloop.core.config import Settings
from greenloop.persistence.local_storage import create_local_storage
from greenloop.persistence.snapshot_store import EvidenceSnapshotStore
from greenloop.services.evidence_ledger import EvidenceLedger
from greenloop.services.live_feed import LiveFeedPoller
from greenloop.services.notifications import EvidenceToastWatcher, ToastCenter
from greenloop.services.proof_inspector import ProofInspector

logger = structlog.get_logger(__name__)


@dataclass
class ServiceContainer:
    ledger: EvidenceLedger
    store: EvidenceSnapshotStore
    toasts: ToastCenter
    watcher: EvidenceToastWatcher
    inspector: ProofInspector
    live_feed: LiveFeedPoller
    feed_client: MirrorFeedClient
    live_feed_enabled: bool = True
    _unsubscribe: Callable[[], None] | None = field(default=None, repr=False)

    async def startup(self) -> None:
        await asyncio.to_thread(self.ledger.load)
        if self._unsubscribe is None:
            self._unsubscribe = self.ledger.subscribe(self.watcher)
        if self.live_feed_enabled:
            await self.live_feed.start()

    async def shutdown(self) -> None:
        await self.live_feed.stop()
        await self.feed_client.close()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await asyncio.to_thread(self.store.close)


def build_container(settings: Settings) -> ServiceContainer:
    storage = create_local_storage(
        settings.ledger.storage_url,
        quota_bytes=settings.ledger.storage_quota_bytes,
    )
    store = EvidenceSnapshotStore(storage, settings.ledger.storage_key)
    ledger = EvidenceLedger(
        store,
        max_items=settings.ledger.max_items,
        hashscan_base_url=settings.hashscan.base_url,
    )
    toasts = ToastCenter(duration_seconds=settings.toast.duration_seconds)
    feed_client = MirrorFeedClient.from_config(settings.live_feed)

    logger.info(
        "Proof store services built",
        max_items=settings.ledger.max_items,
        storage="database" if settings.ledger.storage_url else "memory",
        live_feed_url=settings.live_feed.url,
        live_feed_enabled=settings.live_feed.enabled,
    )

    return ServiceContainer(
        ledger=ledger,
        store=store,
        toasts=toasts,
        watcher=EvidenceToastWatcher(
            toasts,
            surface_persistence_failures=settings.toast.surface_persistence_failures,
        ),
        inspector=ProofInspector(ledger),
        live_feed=LiveFeedPoller(
            feed_client,
            interval_seconds=settings.live_feed.interval_seconds,
            toasts=toasts,
        ),
        feed_client=feed_client,
        live_feed_enabled=settings.live_feed.enabled,
    )
