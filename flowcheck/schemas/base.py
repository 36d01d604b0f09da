"""Base Pydantic schemas with common patterns.

Python code uses snake_case attributes; JSON payloads use the camelCase
names the graph editor produces (``isValid``, ``nodeId``, ``actionId``).
Both spellings are accepted on input.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with common configuration for all schemas.

    Configures Pydantic v2 settings for consistent behavior across all schemas.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )


class ErrorResponse(BaseSchema):
    """Standard error response schema."""

    error: str = Field(
        ...,
        description="Error type identifier",
        examples=["DUPLICATE_IDENTIFIER"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Duplicate node ids: n1"],
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details",
        examples=[{"kind": "node", "duplicate_ids": ["n1"]}],
    )


__all__ = [
    "BaseSchema",
    "ErrorResponse",
]
