"""Live proof feed routes."""

from fastapi import APIRouter

from greenloop.core.dependencies import LiveFeed
from greenloop.schemas.v1.live_feed import LiveFeedRefreshResponse, LiveFeedResponse

router = APIRouter(prefix="/proof-store", tags=["live-feed"])


@router.get("/live-feed", response_model=LiveFeedResponse)
async def get_live_feed(live_feed: LiveFeed):
    return LiveFeedResponse(
        proof_feed=live_feed.entries,
        is_loading=live_feed.is_loading,
        last_updated=live_feed.last_updated,
    )


@router.post("/live-feed/refresh", response_model=LiveFeedRefreshResponse)
async def refresh_live_feed(live_feed: LiveFeed):
    """Fetch now. A failed fetch still answers 200 with the previous feed."""
    refreshed = await live_feed.refresh()
    return LiveFeedRefreshResponse(
        proof_feed=live_feed.entries,
        is_loading=live_feed.is_loading,
        last_updated=live_feed.last_updated,
        refreshed=refreshed,
    )
