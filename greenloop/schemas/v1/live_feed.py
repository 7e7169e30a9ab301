"""Live proof feed schemas."""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from greenloop.schemas.v1.common import CamelModel


class LiveFeedEntry(CamelModel):
    """Server-sourced proof entry. Unknown fields are kept as-is."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str | None = None
    type: str | None = None
    lot_id: str | None = None
    project_id: str | None = None
    topic_id: str | None = None
    sequence_number: int | str | None = None
    timestamp: str | None = None
    consensus_timestamp: str | None = None
    raw_message: Any | None = None
    title: str | None = None
    source: str | None = None


class LiveFeedResponse(CamelModel):
    proof_feed: list[LiveFeedEntry] = Field(default_factory=list)
    is_loading: bool = False
    last_updated: datetime | None = None


class LiveFeedRefreshResponse(LiveFeedResponse):
    refreshed: bool
