"""Health check routes."""

from fastapi import APIRouter, Request

from greenloop.schemas.v1.health import HealthResponse, ReadyResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check."""
    return HealthResponse(status="ok")


@router.get("/health/ready", response_model=ReadyResponse)
async def readiness_check(request: Request):
    """Readiness with ledger persistence and live feed status."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        return ReadyResponse(status="starting")

    ledger = services.ledger
    live_feed_ok = not services.live_feed_enabled or services.live_feed.running
    dependencies = {
        "ledger_storage": ledger.persisted,
        "live_feed_poller": live_feed_ok,
    }
    status = "ready" if all(dependencies.values()) else "degraded"
    return ReadyResponse(
        status=status,
        dependencies=dependencies,
        ledger_size=len(ledger),
        ledger_persisted=ledger.persisted,
    )


@router.get("/health/live", response_model=HealthResponse)
async def liveness_check():
    """Liveness check."""
    return HealthResponse(status="alive")
