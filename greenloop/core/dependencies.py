"""Dependency injection type aliases."""

from typing import Annotated

from fastapi import Depends, Request

from greenloop.services.container import ServiceContainer
from greenloop.services.evidence_ledger import EvidenceLedger
from greenloop.services.live_feed import LiveFeedPoller
from greenloop.services.notifications import ToastCenter
from greenloop.services.proof_inspector import ProofInspector


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_ledger(request: Request) -> EvidenceLedger:
    return get_container(request).ledger


def get_toasts(request: Request) -> ToastCenter:
    return get_container(request).toasts


def get_inspector(request: Request) -> ProofInspector:
    return get_container(request).inspector


def get_live_feed(request: Request) -> LiveFeedPoller:
    return get_container(request).live_feed


Ledger = Annotated[EvidenceLedger, Depends(get_ledger)]
Toasts = Annotated[ToastCenter, Depends(get_toasts)]
Inspector = Annotated[ProofInspector, Depends(get_inspector)]
LiveFeed = Annotated[LiveFeedPoller, Depends(get_live_feed)]

__all__ = [
    "Inspector",
    "Ledger",
    "LiveFeed",
    "Toasts",
    "get_container",
    "get_inspector",
    "get_ledger",
    "get_live_feed",
    "get_toasts",
]
