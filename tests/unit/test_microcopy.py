"""Unit tests for evidence microcopy."""

from datetime import UTC, datetime

from greenloop.utils.microcopy import (
    DEFAULT_ICON,
    describe_evidence,
    evidence_icon,
    evidence_microcopy,
    format_timestamp,
    shorten_id,
    success_message,
)


def test_icons():
    assert evidence_icon("tx") == "💳"
    assert evidence_icon("file") == "📄"
    assert evidence_icon("topic") == "📡"
    assert evidence_icon("token") == "🪙"
    assert evidence_icon("mystery") == DEFAULT_ICON


def test_shorten_id_keeps_short_ids():
    assert shorten_id("0.0.700567") == "0.0.700567"


def test_shorten_id_abbreviates_long_ids():
    long_id = "0x" + "a" * 30 + "123456"
    assert shorten_id(long_id) == "0xaaaaaa...123456"


def test_describe_defaults_per_kind():
    assert describe_evidence("tx", "0.0.1", {}) == "Transaction 0.0.1 completed"
    assert describe_evidence("file", "0.0.2", {}) == "File 0.0.2 stored on HFS"
    assert describe_evidence("topic", "0.0.3", {}) == "Message 0.0.3 submitted to HCS"
    assert describe_evidence("token", "0.0.4", None) == "Token 0.0.4 minted"
    assert describe_evidence("other", "0.0.5", {}) == "Evidence 0.0.5 recorded"


def test_describe_uses_action_and_sequence():
    assert describe_evidence("token", "0.0.4", {"action": "transferred"}) == "Token 0.0.4 transferred"
    assert describe_evidence("topic", "0.0.3", {"sequence": 42}) == "Message 0.0.3#42 submitted to HCS"


def test_microcopy_and_success_messages():
    assert evidence_microcopy("file", {"action": "uploaded"}) == "File uploaded"
    assert evidence_microcopy("tx", {}) == "Transaction completed"
    assert evidence_microcopy("unknown", {}) == "Evidence recorded"
    assert success_message("topic") == "Message anchored on Hedera Consensus Service"
    assert success_message("unknown") == "Evidence recorded successfully"


def test_format_timestamp():
    assert format_timestamp(datetime(2025, 3, 1, 9, 5, 7, tzinfo=UTC)) == "09:05:07"
