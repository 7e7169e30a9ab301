"""Unit tests for service wiring."""

import pytest

from greenloop.core.config import LedgerConfig, LiveFeedConfig, Settings
from greenloop.core.database import create_storage_engine
from greenloop.persistence.local_storage import MemoryLocalStorage, SqlLocalStorage
from greenloop.services.container import build_container


def _settings(tmp_path=None, **ledger_overrides) -> Settings:
    ledger = LedgerConfig(
        storage_url=f"sqlite:///{tmp_path / 'proofs.db'}" if tmp_path else "",
        **ledger_overrides,
    )
    return Settings(ledger=ledger, live_feed=LiveFeedConfig(enabled=False))


def test_build_container_applies_ledger_bound():
    services = build_container(_settings(max_items=5))
    assert services.ledger.max_items == 5
    assert services.inspector.collapsed is True
    assert services.live_feed_enabled is False


def test_build_container_picks_storage_backend(tmp_path):
    assert isinstance(build_container(_settings()).store._storage, MemoryLocalStorage)
    services = build_container(_settings(tmp_path))
    try:
        assert isinstance(services.store._storage, SqlLocalStorage)
    finally:
        services.store.close()


@pytest.mark.asyncio
async def test_startup_wires_toasts_to_ledger():
    services = build_container(_settings())
    await services.startup()
    try:
        services.ledger.add_evidence("tx", "0.0.1@1.2", "Purchase")
        toasts = services.toasts.active()
        assert len(toasts) == 1
        assert toasts[0].evidence_id == "0.0.1@1.2"
        assert services.live_feed.running is False
    finally:
        await services.shutdown()


@pytest.mark.asyncio
async def test_shutdown_unsubscribes_watcher():
    services = build_container(_settings())
    await services.startup()
    await services.shutdown()

    services.ledger.add_evidence("tx", "0.0.1@1.2", "Purchase")
    assert services.toasts.active() == []


@pytest.mark.asyncio
async def test_startup_restores_persisted_records(tmp_path):
    first = build_container(_settings(tmp_path))
    await first.startup()
    first.ledger.add_evidence("file", "0.0.99", "Audit report", source="Auditor")
    await first.shutdown()

    storage = SqlLocalStorage(create_storage_engine(f"sqlite:///{tmp_path / 'proofs.db'}"))
    try:
        assert storage.get_item("greenloop_proof_store") is not None
    finally:
        storage.close()

    second = build_container(_settings(tmp_path))
    await second.startup()
    try:
        records = second.ledger.records
        assert len(records) == 1
        assert records[0].evidence_id == "0.0.99"
        assert records[0].source == "Auditor"
        assert second.toasts.active() == []
    finally:
        await second.shutdown()
