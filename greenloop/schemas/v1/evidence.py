"""Evidence record schemas."""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from greenloop.schemas.v1.common import CamelModel


class EvidenceRecord(CamelModel):
    """One logged proof of an on-chain action. Immutable once created."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    kind: str
    evidence_id: str
    label: str
    metadata: dict[str, Any] = Field(default_factory=dict, alias="meta")
    source: str = "Unknown"
    timestamp: datetime
    hashscan_url: str


class AddEvidenceRequest(CamelModel):
    kind: str = Field(min_length=1)
    evidence_id: str = Field(min_length=1)
    label: str = Field(min_length=1)
    metadata: dict[str, Any] = Field(default_factory=dict, alias="meta")
    source: str = "Unknown"


class EvidenceListResponse(CamelModel):
    items: list[EvidenceRecord]
    total: int
    filtered: int


class ClearEvidenceResponse(CamelModel):
    cleared: int


class HashscanUrlResponse(CamelModel):
    kind: str
    evidence_id: str
    hashscan_url: str
