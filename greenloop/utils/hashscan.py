"""Hashscan explorer URL resolution."""

from __future__ import annotations

from greenloop.schemas.v1.common import EvidenceKind

DEFAULT_HASHSCAN_BASE_URL = "https://hashscan.io/testnet"

_KIND_PATHS: dict[str, str] = {
    EvidenceKind.TRANSACTION: "transaction",
    EvidenceKind.FILE: "file",
    EvidenceKind.TOPIC_MESSAGE: "topic",
    EvidenceKind.TOKEN: "token",
}


def resolve_url(kind: str, evidence_id: str, base_url: str = DEFAULT_HASHSCAN_BASE_URL) -> str:
    """Map an evidence kind and id to its Hashscan page.

    Unknown kinds resolve to the bare explorer base URL.
    """
    base = base_url.rstrip("/")
    path = _KIND_PATHS.get(kind)
    if path is None:
        return base
    return f"{base}/{path}/{evidence_id}"
