"""Request-scoped tracing context.

Stores the request ID and W3C traceparent in contextvars so they reach
outbound HTTP calls (the live feed fetch) and structlog output.
"""

import uuid
from contextvars import ContextVar
from typing import Any

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
trace_parent_ctx: ContextVar[str | None] = ContextVar("trace_parent", default=None)


def get_request_id() -> str | None:
    return request_id_ctx.get()


def set_request_id(value: str | None) -> None:
    """Set the request ID in context, generating one when missing."""
    if value is None:
        value = str(uuid.uuid4())
    request_id_ctx.set(value)


def get_trace_parent() -> str | None:
    return trace_parent_ctx.get()


def set_trace_parent(value: str | None) -> None:
    trace_parent_ctx.set(value or None)


def clear_tracing_context() -> None:
    """Clear request-scoped tracing context after request completion."""
    request_id_ctx.set(None)
    trace_parent_ctx.set(None)


def get_tracing_headers() -> dict[str, str]:
    """Get tracing headers for outbound requests.

    Example:
        headers = get_tracing_headers()
        async with httpx.AsyncClient() as client:
            response = await client.get(url, headers=headers)
    """
    headers: dict[str, str] = {}

    if rid := request_id_ctx.get():
        headers["X-Request-ID"] = rid

    if tp := trace_parent_ctx.get():
        headers["traceparent"] = tp

    return headers


def bind_contextvars_to_logging() -> dict[str, Any]:
    """Get tracing contextvars as a dict for structlog binding."""
    context: dict[str, Any] = {}
    if rid := request_id_ctx.get():
        context["request_id"] = rid
    if tp := trace_parent_ctx.get():
        context["trace_parent"] = tp
    return context
