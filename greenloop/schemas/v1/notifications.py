"""Toast notification schemas."""

from datetime import datetime

from greenloop.schemas.v1.common import CamelModel, ToastVariant


class Toast(CamelModel):
    toast_id: str
    title: str
    description: str
    variant: ToastVariant = ToastVariant.DEFAULT
    kind: str | None = None
    evidence_id: str | None = None
    hashscan_url: str | None = None
    source: str | None = None
    microcopy: str | None = None
    success_message: str | None = None
    created_at: datetime
    expires_at: datetime


class ToastListResponse(CamelModel):
    toasts: list[Toast]


class CopyIdResponse(CamelModel):
    copied: bool
    text: str | None = None
