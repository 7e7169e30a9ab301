"""Proof inspector routes."""

from fastapi import APIRouter, Query

from greenloop.core.dependencies import Inspector
from greenloop.schemas.v1.common import ALL_FILTER
from greenloop.schemas.v1.evidence import ClearEvidenceResponse
from greenloop.schemas.v1.inspector import InspectorStateResponse, InspectorView

router = APIRouter(prefix="/proof-store/inspector", tags=["inspector"])


@router.get("", response_model=InspectorView)
async def get_inspector(
    inspector: Inspector,
    search: str = Query(default=""),
    kind: str = Query(default=ALL_FILTER),
    source: str = Query(default=ALL_FILTER),
    offset: int = Query(default=0, ge=0),
    limit: int | None = Query(default=None, ge=1),
):
    return inspector.view(search=search, kind=kind, source=source, offset=offset, limit=limit)


@router.post("/toggle", response_model=InspectorStateResponse)
async def toggle_inspector(inspector: Inspector):
    return InspectorStateResponse(collapsed=inspector.toggle())


@router.post("/clear", response_model=ClearEvidenceResponse)
def clear_from_inspector(inspector: Inspector):
    """Clear all evidence; 409 when the ledger is already empty."""
    return ClearEvidenceResponse(cleared=inspector.clear_all())
