# ruff: noqa: D107
"""Base exception classes."""

import logging
from typing import Any

from fastapi import HTTPException

logger = logging.getLogger(__name__)


class BaseAppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(
            status_code=status_code,
            detail={"message": message, "error_code": error_code, "details": self.details},
        )


class NotFoundError(BaseAppException):
    """Exception raised when a resource is not found."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: dict[str, Any] | None = None,
        error_code: str = "NOT_FOUND",
    ):
        super().__init__(message=message, status_code=404, error_code=error_code, details=details)


class ValidationError(BaseAppException):
    """Exception raised when validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            status_code=422,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class PersistenceError(Exception):
    """Raised by storage backends when a snapshot cannot be read or written."""


class ConsistencyWarning(UserWarning):
    """Non-fatal inconsistency in board state. Logged, never raised."""


def report_consistency(message: str, **details: Any) -> None:
    """Log a ConsistencyWarning with structured details."""
    logger.warning(
        "%s: %s",
        ConsistencyWarning.__name__,
        message,
        extra={"consistency_details": details},
    )
