"""Proof store error hierarchy."""

from typing import Any


class GreenLoopError(Exception):
    """Base exception for proof store errors."""

    code = "GREENLOOP_INTERNAL_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(GreenLoopError):
    """Invalid request parameters."""

    code = "GREENLOOP_INVALID_REQUEST"
    status_code = 400


class NotFoundError(GreenLoopError):
    """Resource not found."""

    code = "GREENLOOP_NOT_FOUND"
    status_code = 404


class ConflictError(GreenLoopError):
    """Operation not allowed in the current state (e.g. clearing an empty ledger)."""

    code = "GREENLOOP_CONFLICT"
    status_code = 409


class DependencyError(GreenLoopError):
    """External dependency failure."""

    code = "GREENLOOP_DEPENDENCY_FAILURE"
    status_code = 502


class FeedFetchError(DependencyError):
    """Live proof feed could not be fetched or parsed."""

    code = "GREENLOOP_FEED_FETCH_FAILED"
    status_code = 502

    def __init__(
        self,
        message: str,
        url: str,
        status: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        base_details: dict[str, Any] = {"url": url}
        if status is not None:
            base_details["status"] = status
        super().__init__(message, details={**base_details, **(details or {})})
        self.url = url
        self.status = status


class InternalError(GreenLoopError):
    """Internal server error."""

    code = "GREENLOOP_INTERNAL_ERROR"
    status_code = 500


class PersistenceError(InternalError):
    """Ledger snapshot could not be serialized or written."""

    code = "GREENLOOP_PERSISTENCE_FAILED"
    status_code = 500

    def __init__(
        self,
        message: str,
        key: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details={**(details or {}), "key": key})
        self.key = key


class StorageQuotaExceededError(PersistenceError):
    """Value would push local storage past its quota."""

    code = "GREENLOOP_STORAGE_QUOTA_EXCEEDED"
    status_code = 507


ERROR_STATUS_MAP: dict[type[GreenLoopError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    ConflictError: 409,
    DependencyError: 502,
    FeedFetchError: 502,
    InternalError: 500,
    PersistenceError: 500,
    StorageQuotaExceededError: 507,
}


def get_status_code(error: GreenLoopError) -> int:
    """Get HTTP status code for error."""
    return ERROR_STATUS_MAP.get(type(error), 500)
