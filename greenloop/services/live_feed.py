"""Periodic live proof feed poller.

The feed lives next to the evidence ledger and is never merged into it.
Each fetch gets a monotonically increasing sequence number; a response is
applied only if it is newer than the last applied one, so overlapping
fetches cannot roll the feed back. Failures keep the previous feed.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Callable
from datetime import datetime
from typing import Protocol

import structlog

from greenloop.core.errors import FeedFetchError
from greenloop.core.metrics import greenloop_live_feed_entries, greenloop_live_feed_fetch_total
from greenloop.schemas.v1.common import ToastVariant
from greenloop.schemas.v1.live_feed import LiveFeedEntry
from greenloop.services.notifications import ToastCenter
from greenloop.utils.clock import utc_now

logger = structlog.get_logger(__name__)

DEFAULT_INTERVAL_SECONDS = 30.0


class FeedSource(Protocol):
    async def fetch_proof_feed(self) -> list[LiveFeedEntry]: ...


class LiveFeedPoller:
    def __init__(
        self,
        source: FeedSource,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        toasts: ToastCenter | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._source = source
        self._interval = interval_seconds
        self._toasts = toasts
        self._clock = clock

        self._entries: list[LiveFeedEntry] = []
        self._last_updated: datetime | None = None
        self._sequence = itertools.count(1)
        self._last_applied = 0
        self._in_flight = 0
        self._stopped = False

        self._timer_task: asyncio.Task[None] | None = None
        self._fetch_tasks: set[asyncio.Task[bool]] = set()

    @property
    def entries(self) -> list[LiveFeedEntry]:
        return list(self._entries)

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def last_updated(self) -> datetime | None:
        return self._last_updated

    @property
    def running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    async def start(self) -> None:
        """Fetch immediately, then every ``interval_seconds``."""
        if self.running:
            return
        self._stopped = False
        self._timer_task = asyncio.create_task(self._run_timer(), name="live-feed-timer")
        logger.info("Live feed poller started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Stop the timer; in-flight fetches finish but are not applied."""
        self._stopped = True
        if self._timer_task is not None:
            self._timer_task.cancel()
            try:
                await self._timer_task
            except asyncio.CancelledError:
                pass
            self._timer_task = None

        if self._fetch_tasks:
            await asyncio.gather(*self._fetch_tasks, return_exceptions=True)
        logger.info("Live feed poller stopped")

    async def refresh(self) -> bool:
        """Manual fetch-and-replace outside the timer cadence.

        Returns True when the response was applied. Only success produces a
        toast; failure keeps the previous feed silently.
        """
        applied = await self._fetch(trigger="manual")
        if applied and self._toasts is not None:
            self._toasts.push(
                title="Proof feed refreshed",
                description=f"Loaded {len(self._entries)} live proofs from Hedera network",
                variant=ToastVariant.SUCCESS,
            )
        return applied

    async def _run_timer(self) -> None:
        while True:
            task = asyncio.create_task(self._fetch(trigger="timer"))
            self._fetch_tasks.add(task)
            task.add_done_callback(self._fetch_tasks.discard)
            await asyncio.sleep(self._interval)

    async def _fetch(self, *, trigger: str) -> bool:
        sequence = next(self._sequence)
        self._in_flight += 1
        try:
            entries = await self._source.fetch_proof_feed()
        except FeedFetchError as exc:
            greenloop_live_feed_fetch_total.labels(trigger=trigger, status="failed").inc()
            logger.warning(
                "Live proof feed fetch failed; keeping previous feed",
                trigger=trigger,
                sequence=sequence,
                error=exc.message,
                error_details=exc.details or {},
                kept_entries=len(self._entries),
            )
            return False
        except Exception:
            greenloop_live_feed_fetch_total.labels(trigger=trigger, status="failed").inc()
            logger.exception(
                "Unexpected live proof feed error; keeping previous feed",
                trigger=trigger,
                sequence=sequence,
            )
            return False
        finally:
            self._in_flight -= 1

        if self._stopped or sequence <= self._last_applied:
            greenloop_live_feed_fetch_total.labels(trigger=trigger, status="discarded").inc()
            logger.info(
                "Discarding stale live feed response",
                trigger=trigger,
                sequence=sequence,
                last_applied=self._last_applied,
                stopped=self._stopped,
            )
            return False

        self._entries = entries
        self._last_applied = sequence
        self._last_updated = self._clock()
        greenloop_live_feed_entries.set(len(entries))
        greenloop_live_feed_fetch_total.labels(trigger=trigger, status="applied").inc()
        logger.debug("Live proof feed updated", trigger=trigger, sequence=sequence, entries=len(entries))
        return True
