"""Toast routes."""

from fastapi import APIRouter, status

from greenloop.core.dependencies import Toasts
from greenloop.core.errors import NotFoundError
from greenloop.schemas.v1.notifications import CopyIdResponse, ToastListResponse

router = APIRouter(prefix="/proof-store", tags=["notifications"])


@router.get("/toasts", response_model=ToastListResponse)
async def list_toasts(toasts: Toasts):
    return ToastListResponse(toasts=toasts.active())


@router.delete("/toasts/{toast_id}", status_code=status.HTTP_204_NO_CONTENT)
async def dismiss_toast(toast_id: str, toasts: Toasts) -> None:
    if not toasts.dismiss(toast_id):
        raise NotFoundError("Toast not found", details={"toast_id": toast_id})


@router.post("/toasts/{toast_id}/copy", response_model=CopyIdResponse)
async def copy_toast_id(toast_id: str, toasts: Toasts):
    """Return the toast's evidence id for the client to place on its clipboard."""
    copied: list[str] = []
    ok = toasts.copy_id(toast_id, copied.append)
    return CopyIdResponse(copied=ok, text=copied[0] if copied else None)
