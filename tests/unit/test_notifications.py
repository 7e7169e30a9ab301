"""Unit tests for toasts and the evidence toast watcher."""

from greenloop.schemas.v1.common import ToastVariant
from greenloop.services.evidence_ledger import LedgerEvent, LedgerEventType
from greenloop.services.notifications import EvidenceToastWatcher


def test_toast_expires_after_duration(toasts, clock):
    toast = toasts.push(title="Hello", description="World")
    assert toasts.active() == [toast]

    clock.advance(5.9)
    assert toasts.active() == [toast]

    clock.advance(0.2)
    assert toasts.active() == []


def test_toasts_expire_independently(toasts, clock):
    first = toasts.push(title="First", description="")
    clock.advance(3)
    second = toasts.push(title="Second", description="")
    clock.advance(3.5)
    assert toasts.active() == [second]
    assert first not in toasts.active()


def test_push_drops_expired_toasts_without_polling(ledger, toasts, clock):
    ledger.subscribe(EvidenceToastWatcher(toasts))
    for n in range(500):
        ledger.add_evidence("tx", f"0.0.{n}", f"Purchase {n}")
        clock.advance(10)

    assert len(ledger) == 100
    assert len(toasts._toasts) <= 1


def test_push_keeps_unexpired_toasts(toasts, clock):
    first = toasts.push(title="First", description="")
    clock.advance(2)
    second = toasts.push(title="Second", description="")
    assert toasts._toasts == [first, second]


def test_dismiss_removes_only_that_toast(toasts):
    a = toasts.push(title="A", description="")
    b = toasts.push(title="B", description="")
    assert toasts.dismiss(a.toast_id) is True
    assert toasts.active() == [b]
    assert toasts.dismiss(a.toast_id) is False


def test_copy_id_writes_evidence_id(toasts):
    toast = toasts.push(title="Badge", description="", evidence_id="0.0.600222")
    copied = []
    assert toasts.copy_id(toast.toast_id, copied.append) is True
    assert copied == ["0.0.600222"]


def test_copy_id_failure_is_logged_not_raised(toasts):
    toast = toasts.push(title="Badge", description="", evidence_id="0.0.600222")

    def broken_clipboard(text):
        raise OSError("clipboard unavailable")

    assert toasts.copy_id(toast.toast_id, broken_clipboard) is False


def test_copy_id_without_evidence_is_false(toasts):
    toast = toasts.push(title="Plain", description="")
    assert toasts.copy_id(toast.toast_id, lambda text: None) is False
    assert toasts.copy_id("missing", lambda text: None) is False


def test_watcher_toasts_new_records(ledger, toasts):
    ledger.subscribe(EvidenceToastWatcher(toasts))

    record = ledger.add_evidence(
        "topic", "0.0.900123", "Proof anchored", metadata={"sequence": 7}, source="Proof Upload"
    )

    [toast] = toasts.active()
    assert toast.title == "📡 Proof anchored"
    assert toast.description == "Message 0.0.900123#7 submitted to HCS"
    assert toast.variant == ToastVariant.SUCCESS
    assert toast.hashscan_url == record.hashscan_url
    assert toast.evidence_id == "0.0.900123"
    assert toast.source == "Proof Upload"
    assert toast.success_message == "Message anchored on Hedera Consensus Service"


def test_watcher_ignores_repeated_newest_id(ledger, toasts):
    watcher = EvidenceToastWatcher(toasts)
    ledger.subscribe(watcher)
    ledger.add_evidence("tx", "0.0.1", "Payment")

    watcher(LedgerEvent(type=LedgerEventType.ADDED, records=ledger.records))

    assert len(toasts.active()) == 1
    assert watcher.last_seen_id == ledger.records[0].id


def test_watcher_shows_each_rapid_append(ledger, toasts):
    ledger.subscribe(EvidenceToastWatcher(toasts))
    ledger.add_evidence("tx", "0.0.1", "Payment")
    ledger.add_evidence("tx", "0.0.1", "Payment")
    assert len(toasts.active()) == 2


def test_watcher_confirms_clear(ledger, toasts):
    ledger.subscribe(EvidenceToastWatcher(toasts))
    ledger.clear_evidence()
    [toast] = toasts.active()
    assert toast.title == "Evidence cleared"


def test_watcher_surfaces_persistence_failures(toasts):
    watcher = EvidenceToastWatcher(toasts)
    watcher(LedgerEvent(type=LedgerEventType.PERSISTENCE_FAILED, records=()))
    [toast] = toasts.active()
    assert toast.variant == ToastVariant.WARNING


def test_watcher_can_silence_persistence_failures(toasts):
    watcher = EvidenceToastWatcher(toasts, surface_persistence_failures=False)
    watcher(LedgerEvent(type=LedgerEventType.PERSISTENCE_FAILED, records=()))
    assert toasts.active() == []
