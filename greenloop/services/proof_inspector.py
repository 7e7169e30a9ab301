"""Proof inspector: collapsible evidence panel with search and filters."""

from __future__ import annotations

import structlog

from greenloop.core.errors import ConflictError, ValidationError
from greenloop.schemas.v1.common import ALL_FILTER
from greenloop.schemas.v1.evidence import EvidenceRecord
from greenloop.schemas.v1.inspector import InspectorItem, InspectorView
from greenloop.services.evidence_ledger import EvidenceLedger
from greenloop.utils.microcopy import format_timestamp

logger = structlog.get_logger(__name__)


def matches_filters(
    record: EvidenceRecord,
    *,
    search: str = "",
    kind: str = ALL_FILTER,
    source: str = ALL_FILTER,
) -> bool:
    """Search term (label or evidence id, case-insensitive) AND kind AND source."""
    if search:
        needle = search.lower()
        if needle not in record.label.lower() and needle not in record.evidence_id.lower():
            return False
    if kind != ALL_FILTER and record.kind != kind:
        return False
    if source != ALL_FILTER and record.source != source:
        return False
    return True


def filter_records(
    records: tuple[EvidenceRecord, ...] | list[EvidenceRecord],
    *,
    search: str = "",
    kind: str = ALL_FILTER,
    source: str = ALL_FILTER,
) -> list[EvidenceRecord]:
    return [r for r in records if matches_filters(r, search=search, kind=kind, source=source)]


def paginate(items: list[EvidenceRecord], offset: int = 0, limit: int | None = None) -> list[EvidenceRecord]:
    if offset < 0:
        raise ValidationError("offset must not be negative", details={"offset": offset})
    if limit is not None and limit < 1:
        raise ValidationError("limit must be positive", details={"limit": limit})
    end = None if limit is None else offset + limit
    return items[offset:end]


def _inspector_item(record: EvidenceRecord) -> InspectorItem:
    return InspectorItem.model_validate({**record.model_dump(), "display_time": format_timestamp(record.timestamp)})


class ProofInspector:
    """Panel state is Collapsed or Expanded; only ``toggle`` moves between them."""

    def __init__(self, ledger: EvidenceLedger, *, collapsed: bool = True) -> None:
        self._ledger = ledger
        self._collapsed = collapsed

    @property
    def collapsed(self) -> bool:
        return self._collapsed

    def toggle(self) -> bool:
        self._collapsed = not self._collapsed
        return self._collapsed

    def unique_sources(self) -> list[str]:
        return list(dict.fromkeys(record.source for record in self._ledger.records))

    def view(
        self,
        *,
        search: str = "",
        kind: str = ALL_FILTER,
        source: str = ALL_FILTER,
        offset: int = 0,
        limit: int | None = None,
    ) -> InspectorView:
        records = self._ledger.records
        filtered = filter_records(records, search=search, kind=kind, source=source)
        return InspectorView(
            collapsed=self._collapsed,
            items=[_inspector_item(record) for record in paginate(filtered, offset, limit)],
            total=len(records),
            filtered=len(filtered),
            sources=self.unique_sources(),
            can_clear=len(records) > 0,
        )

    def clear_all(self) -> int:
        """Clear the ledger; refused when there is nothing to clear."""
        count = len(self._ledger)
        if count == 0:
            raise ConflictError("There is no evidence to clear")
        self._ledger.clear_evidence()
        logger.info("Inspector cleared evidence", cleared=count)
        return count
