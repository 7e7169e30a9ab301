"""Evidence ledger routes."""

from fastapi import APIRouter, Query, status

from greenloop.core.config import get_settings
from greenloop.core.dependencies import Ledger
from greenloop.schemas.v1.common import ALL_FILTER
from greenloop.schemas.v1.evidence import (
    AddEvidenceRequest,
    ClearEvidenceResponse,
    EvidenceListResponse,
    EvidenceRecord,
    HashscanUrlResponse,
)
from greenloop.services.proof_inspector import filter_records, paginate
from greenloop.utils.hashscan import resolve_url

router = APIRouter(prefix="/proof-store", tags=["evidence"])


@router.get("/evidence", response_model=EvidenceListResponse)
async def list_evidence(
    ledger: Ledger,
    kind: str = Query(default=ALL_FILTER),
    source: str = Query(default=ALL_FILTER),
    search: str = Query(default=""),
    offset: int = Query(default=0, ge=0),
    limit: int | None = Query(default=None, ge=1),
):
    """List ledger records, newest first."""
    records = ledger.records
    filtered = filter_records(records, search=search, kind=kind, source=source)
    return EvidenceListResponse(
        items=paginate(filtered, offset, limit),
        total=len(records),
        filtered=len(filtered),
    )


@router.post(
    "/evidence",
    response_model=EvidenceRecord,
    status_code=status.HTTP_201_CREATED,
)
def add_evidence(body: AddEvidenceRequest, ledger: Ledger):
    """Append a record. Sync handler: the ledger writes through to storage in the threadpool."""
    return ledger.add_evidence(
        body.kind,
        body.evidence_id,
        body.label,
        metadata=body.metadata,
        source=body.source,
    )


@router.delete("/evidence", response_model=ClearEvidenceResponse)
def clear_evidence(ledger: Ledger):
    """Clear every record. Idempotent."""
    cleared = len(ledger)
    ledger.clear_evidence()
    return ClearEvidenceResponse(cleared=cleared)


@router.get("/evidence/kinds/{kind}", response_model=list[EvidenceRecord])
async def get_evidence_by_kind(kind: str, ledger: Ledger):
    return ledger.get_evidence_by_kind(kind)


@router.get("/evidence/sources/{source:path}", response_model=list[EvidenceRecord])
async def get_evidence_by_source(source: str, ledger: Ledger):
    return ledger.get_evidence_by_source(source)


@router.get("/hashscan-url", response_model=HashscanUrlResponse)
async def get_hashscan_url(
    kind: str = Query(...),
    evidence_id: str = Query(..., alias="id"),
):
    """Resolve the explorer URL for any kind; unknown kinds get the base URL."""
    url = resolve_url(kind, evidence_id, get_settings().hashscan.base_url)
    return HashscanUrlResponse(kind=kind, evidence_id=evidence_id, hashscan_url=url)
