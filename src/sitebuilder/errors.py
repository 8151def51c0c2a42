"""Site builder error hierarchy.

Provides a structured error hierarchy for all repository operations:
- SiteBuilderError: Base exception for all application errors
- ValidationError: A required field is missing, empty or malformed
- NotFoundError: A referenced or targeted row does not exist
- StorageError: The SQLite substrate failed (the transaction is rolled back)

Each error carries a message, a recoverable flag and a context dict, and can
be turned into a structured representation for whatever transport sits in
front of the repository.

Usage:
    from sitebuilder.errors import NotFoundError

    if page is None:
        raise NotFoundError(
            f"Page with id {page_id} does not exist",
            resource_type="page",
            resource_id=page_id,
        )
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# Error Base Class
# =============================================================================


class SiteBuilderError(Exception):
    """Base exception for all site builder errors.

    Attributes:
        message: Human-readable error description
        recoverable: Whether the caller may retry the operation
        context: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        *,
        recoverable: bool = False,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured dictionary for transport responses."""
        return {
            "type": type(self).__name__.lower().replace("error", ""),
            "message": self.message,
            "recoverable": self.recoverable,
            **{k: v for k, v in self.context.items() if v is not None},
        }


# =============================================================================
# Domain Errors
# =============================================================================


class ValidationError(SiteBuilderError):
    """Input validation failed.

    Example:
        raise ValidationError("name cannot be empty", field="name")
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        if constraint:
            context["constraint"] = constraint
        if value is not None:
            context["value"] = _truncate(str(value), 100)
        super().__init__(message, recoverable=False, context=context)
        self.field = field
        self.constraint = constraint


class NotFoundError(SiteBuilderError):
    """Resource not found."""

    def __init__(
        self,
        message: str,
        *,
        resource_type: str | None = None,
        resource_id: int | str | None = None,
    ) -> None:
        super().__init__(
            message,
            recoverable=False,
            context={"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class StorageError(SiteBuilderError):
    """Errors in the persistence layer.

    Raised for connection loss, constraint violations and schema problems.
    Nothing written by the failing operation remains visible.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        table: str | None = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.pop("context", {})
        if operation:
            context["operation"] = operation
        if table:
            context["table"] = table
        super().__init__(message, recoverable=False, context=context)


# =============================================================================
# Helpers
# =============================================================================


def _truncate(value: str | None, max_len: int) -> str | None:
    """Truncate a string value for safe logging."""
    if value is None:
        return None
    if len(value) <= max_len:
        return value
    return value[:max_len] + "..."


# =============================================================================
# Error Response Helpers
# =============================================================================


@dataclass
class ErrorResponse:
    """Structured error response for a transport layer."""

    error_type: str
    message: str
    recoverable: bool = False
    code: int = -32603
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": {
                "type": self.error_type,
                "code": self.code,
                "message": self.message,
                "recoverable": self.recoverable,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


def error_response(exc: Exception) -> ErrorResponse:
    """Convert an exception to a structured error response."""
    if isinstance(exc, SiteBuilderError):
        return ErrorResponse(
            error_type=type(exc).__name__.lower().replace("error", ""),
            message=exc.message,
            recoverable=exc.recoverable,
            code=get_error_code(exc),
            details=exc.context,
        )

    logger.error("Unexpected %s: %s", type(exc).__name__, exc)
    return ErrorResponse(
        error_type="internal",
        message=str(exc) if str(exc) else "An unexpected error occurred",
        recoverable=False,
    )


# =============================================================================
# JSON-RPC Error Code Mapping
# =============================================================================


ERROR_CODES: dict[type[SiteBuilderError], int] = {
    ValidationError: -32000,
    NotFoundError: -32003,
    StorageError: -32020,
}


def get_error_code(exc: SiteBuilderError) -> int:
    """Get the JSON-RPC error code for a domain error."""
    if type(exc) in ERROR_CODES:
        return ERROR_CODES[type(exc)]
    for error_type, code in ERROR_CODES.items():
        if isinstance(exc, error_type):
            return code
    return -32603
