"""Root conftest for tests."""

import os
from datetime import UTC, datetime, timedelta

import pytest

if os.getenv("APP_ENV", "").strip().lower() == "prod":
    raise RuntimeError("Refusing to run tests with APP_ENV=prod")

os.environ["APP_ENV"] = "local"
os.environ["LIVE_FEED_ENABLED"] = "false"
os.environ["LEDGER_STORAGE_URL"] = ""
os.environ["METRICS_TOKEN"] = "test-metrics-token"


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Auto-apply markers based on test directory structure."""
    dir_marker_map = {
        "unit": pytest.mark.unit,
        "smoke": pytest.mark.smoke,
    }
    for item in items:
        test_path = str(item.fspath)
        for dir_name, marker in dir_marker_map.items():
            if f"/{dir_name}/" in test_path or f"\\{dir_name}\\" in test_path:
                item.add_marker(marker)
                break


class FakeClock:
    """Deterministic clock; advance() moves time forward."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 3, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage():
    from greenloop.persistence.local_storage import MemoryLocalStorage

    return MemoryLocalStorage()


@pytest.fixture
def snapshot_store(storage):
    from greenloop.persistence.snapshot_store import EvidenceSnapshotStore

    return EvidenceSnapshotStore(storage, "greenloop_proof_store")


@pytest.fixture
def ledger(snapshot_store, clock):
    from greenloop.services.evidence_ledger import EvidenceLedger

    return EvidenceLedger(snapshot_store, max_items=100, clock=clock)


@pytest.fixture
def toasts(clock):
    from greenloop.services.notifications import ToastCenter

    return ToastCenter(duration_seconds=6.0, clock=clock)
