"""SQLAlchemy engine for the ledger's key/value storage."""

from __future__ import annotations

from pathlib import Path

import structlog
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

logger = structlog.get_logger(__name__)


def create_storage_engine(url: str, *, echo: bool = False) -> Engine:
    """Create a sync engine; SQLite file parents are created on demand."""
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database not in (None, "", ":memory:"):
        Path(parsed.database).expanduser().parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, echo=echo, pool_pre_ping=True)
    logger.info(
        "Storage engine created",
        backend=parsed.get_backend_name(),
        database=parsed.database,
    )
    return engine


def dispose_engine(engine: Engine | None) -> None:
    if engine is not None:
        engine.dispose()
