"""Health check schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str


class ReadyResponse(BaseModel):
    status: str
    dependencies: dict[str, bool] = Field(default_factory=dict)
    ledger_size: int = 0
    ledger_persisted: bool = True
