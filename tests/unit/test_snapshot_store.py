"""Unit tests for the ledger snapshot store."""

import json
from datetime import UTC, datetime

import pytest

from greenloop.core.errors import PersistenceError
from greenloop.persistence.local_storage import MemoryLocalStorage
from greenloop.persistence.snapshot_store import EvidenceSnapshotStore
from greenloop.schemas.v1.evidence import EvidenceRecord


def _record(**overrides) -> EvidenceRecord:
    values = {
        "id": "file_0.0.700567_1740830400000_1",
        "kind": "file",
        "evidence_id": "0.0.700567",
        "label": "Proof document",
        "metadata": {"action": "uploaded", "lotId": "lot_001"},
        "source": "Proof Upload",
        "timestamp": datetime(2025, 3, 1, 12, 0, tzinfo=UTC),
        "hashscan_url": "https://hashscan.io/testnet/file/0.0.700567",
    }
    values.update(overrides)
    return EvidenceRecord(**values)


def test_load_missing_key_is_empty(snapshot_store):
    assert snapshot_store.load() == []


def test_save_writes_camel_case_array(snapshot_store, storage):
    snapshot_store.save([_record()])
    data = json.loads(storage.get_item("greenloop_proof_store"))
    assert data[0]["evidenceId"] == "0.0.700567"
    assert data[0]["hashscanUrl"].endswith("/file/0.0.700567")
    assert data[0]["meta"] == {"action": "uploaded", "lotId": "lot_001"}


def test_load_accepts_snapshot_written_by_the_dashboard(storage, snapshot_store):
    storage.set_item(
        "greenloop_proof_store",
        json.dumps(
            [
                {
                    "id": "token_0.0.600222_1740830400000",
                    "kind": "token",
                    "evidenceId": "0.0.600222",
                    "label": "Badge",
                    "meta": {},
                    "source": "ClaimsHelper",
                    "timestamp": "2025-03-01T12:00:00.000Z",
                    "hashscanUrl": "https://hashscan.io/testnet/token/0.0.600222",
                }
            ]
        ),
    )
    [record] = snapshot_store.load()
    assert record.evidence_id == "0.0.600222"
    assert record.source == "ClaimsHelper"


@pytest.mark.parametrize("raw", ["{broken", '{"not": "a list"}', '[{"id": 1}]'])
def test_load_corrupt_snapshot_is_empty(storage, snapshot_store, raw):
    storage.set_item("greenloop_proof_store", raw)
    assert snapshot_store.load() == []


def test_load_storage_read_failure_is_empty():
    class _Broken(MemoryLocalStorage):
        def get_item(self, key):
            raise OSError("disk gone")

    assert EvidenceSnapshotStore(_Broken(), "k").load() == []


def test_save_unserializable_metadata_raises_persistence_error(snapshot_store):
    with pytest.raises(PersistenceError):
        snapshot_store.save([_record(metadata={"blob": object()})])


def test_save_wraps_unexpected_storage_errors():
    class _Broken(MemoryLocalStorage):
        def set_item(self, key, value):
            raise RuntimeError("boom")

    with pytest.raises(PersistenceError) as exc_info:
        EvidenceSnapshotStore(_Broken(), "k").save([_record()])
    assert exc_info.value.key == "k"
