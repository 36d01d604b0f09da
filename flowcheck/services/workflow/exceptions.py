"""Workflow graph input exceptions.

These exceptions describe malformed input outside the validator's
contract. They are raised while preparing a request, before any
validation pass runs.
"""

from typing import Any

from flowcheck.core.exceptions import AppError


class GraphInputError(AppError):
    """Base exception for graph payloads the validator cannot accept."""

    def __init__(
        self,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code=error_code, details=details)


class DuplicateIdentifierError(GraphInputError):
    """Raised when node or edge ids are not unique.

    Attributes:
        kind: "node" or "edge".
        duplicate_ids: Ids that occur more than once, in first-seen order.
    """

    def __init__(self, kind: str, duplicate_ids: list[str]) -> None:
        preview = ", ".join(duplicate_ids[:5])
        if len(duplicate_ids) > 5:
            preview += f" (+{len(duplicate_ids) - 5} more)"
        super().__init__(
            message=f"Duplicate {kind} ids: {preview}",
            error_code="DUPLICATE_IDENTIFIER",
            details={"kind": kind, "duplicate_ids": duplicate_ids},
        )
        self.kind = kind
        self.duplicate_ids = duplicate_ids


class GraphTooLargeError(GraphInputError):
    """Raised when a graph exceeds the configured size limits.

    Attributes:
        current: Current count.
        limit: Maximum allowed limit.
        metric: Type of metric (nodes, edges).
    """

    def __init__(self, current: int, limit: int, metric: str = "nodes") -> None:
        super().__init__(
            message=f"Graph too large: {current} {metric} (limit: {limit})",
            error_code="GRAPH_TOO_LARGE",
            details={"current": current, "limit": limit, "metric": metric},
        )
        self.current = current
        self.limit = limit
        self.metric = metric


__all__ = [
    "DuplicateIdentifierError",
    "GraphInputError",
    "GraphTooLargeError",
]
