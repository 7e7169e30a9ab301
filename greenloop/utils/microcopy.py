"""Icons and human-readable text for evidence records and toasts."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from greenloop.schemas.v1.common import EvidenceKind

DEFAULT_ICON = "🔗"

_ICONS: dict[str, str] = {
    EvidenceKind.TRANSACTION: "💳",
    EvidenceKind.FILE: "📄",
    EvidenceKind.TOPIC_MESSAGE: "📡",
    EvidenceKind.TOKEN: "🪙",
}

# (noun, default action) per kind
_DESCRIPTIONS: dict[str, tuple[str, str]] = {
    EvidenceKind.TRANSACTION: ("Transaction", "completed"),
    EvidenceKind.FILE: ("File", "stored on HFS"),
    EvidenceKind.TOPIC_MESSAGE: ("Message", "submitted to HCS"),
    EvidenceKind.TOKEN: ("Token", "minted"),
}

_SUCCESS_MESSAGES: dict[str, str] = {
    EvidenceKind.TRANSACTION: "Transaction verified on Hedera",
    EvidenceKind.FILE: "File secured on Hedera File Service",
    EvidenceKind.TOPIC_MESSAGE: "Message anchored on Hedera Consensus Service",
    EvidenceKind.TOKEN: "Token created on Hedera Token Service",
}
DEFAULT_SUCCESS_MESSAGE = "Evidence recorded successfully"


def evidence_icon(kind: str) -> str:
    return _ICONS.get(kind, DEFAULT_ICON)


def shorten_id(evidence_id: str, max_length: int = 20) -> str:
    """Abbreviate long ids as ``first8...last6``."""
    if len(evidence_id) <= max_length:
        return evidence_id
    return f"{evidence_id[:8]}...{evidence_id[-6:]}"


def describe_evidence(kind: str, evidence_id: str, meta: Mapping[str, Any] | None = None) -> str:
    """One-line description used as the toast body.

    ``meta["action"]`` overrides the per-kind default verb; topic messages
    append ``#sequence`` when the metadata carries one.
    """
    meta = meta or {}
    short_id = shorten_id(evidence_id)
    described = _DESCRIPTIONS.get(kind)
    if described is None:
        return f"Evidence {short_id} recorded"

    noun, default_action = described
    action = meta.get("action") or default_action
    if kind == EvidenceKind.TOPIC_MESSAGE and meta.get("sequence"):
        short_id = f"{short_id}#{meta['sequence']}"
    return f"{noun} {short_id} {action}"


def evidence_microcopy(kind: str, meta: Mapping[str, Any] | None = None) -> str:
    meta = meta or {}
    described = _DESCRIPTIONS.get(kind)
    if described is None:
        return "Evidence recorded"
    noun, default_action = described
    return f"{noun} {meta.get('action') or default_action}"


def success_message(kind: str) -> str:
    return _SUCCESS_MESSAGES.get(kind, DEFAULT_SUCCESS_MESSAGE)


def format_timestamp(value: datetime) -> str:
    return value.strftime("%H:%M:%S")
