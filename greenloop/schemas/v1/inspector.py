"""Proof inspector schemas."""

from greenloop.schemas.v1.common import CamelModel
from greenloop.schemas.v1.evidence import EvidenceRecord


class InspectorItem(EvidenceRecord):
    """An evidence record with its ``HH:MM:SS`` display time."""

    display_time: str


class InspectorView(CamelModel):
    collapsed: bool
    items: list[InspectorItem]
    total: int
    filtered: int
    sources: list[str]
    can_clear: bool


class InspectorStateResponse(CamelModel):
    collapsed: bool
