"""Common exception classes.

Workflow defects are never raised: the validator reports them as data.
Exceptions in this hierarchy signal that a *caller* broke the input
contract (for example duplicate node ids), which the HTTP layer turns
into a client error response.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Application base exception.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code for API responses.
        details: Additional error context as dictionary.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "APP_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


__all__ = [
    "AppError",
]
