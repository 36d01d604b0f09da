"""Pydantic schemas for workflow validation results.

This module defines the report returned by the workflow validator and the
options that parameterise its heuristics. Every finding is a value object:
errors carry a severity, warnings an impact, suggestions a priority. All
result models are frozen; a fresh report is built on every validation.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field

from flowcheck.core.config import settings
from flowcheck.schemas.base import BaseSchema

# =============================================================================
# Validation Enums
# =============================================================================


class ValidationErrorType(str, Enum):
    """Categorical error types.

    Standardized types for all validation findings of error grade.
    """

    # Structure errors
    NO_START_NODE = "no_start_node"
    MULTIPLE_START_NODES = "multiple_start_nodes"
    NO_END_NODE = "no_end_node"
    ORPHANED_NODES = "orphaned_nodes"
    CIRCULAR_DEPENDENCY = "circular_dependency"

    # Connection errors
    INVALID_CONNECTION = "invalid_connection"
    MISSING_CONNECTIONS = "missing_connections"
    TOO_MANY_CONNECTIONS = "too_many_connections"

    # Node configuration errors
    MISSING_REQUIRED_FIELDS = "missing_required_fields"
    INVALID_CONFIGURATION = "invalid_configuration"
    INCOMPATIBLE_SETTINGS = "incompatible_settings"

    # Business logic errors
    APPROVAL_CHAIN_BROKEN = "approval_chain_broken"
    INSUFFICIENT_PERMISSIONS = "insufficient_permissions"
    COMPLIANCE_VIOLATION = "compliance_violation"

    # Performance errors
    TOO_COMPLEX = "too_complex"
    INFINITE_LOOP_RISK = "infinite_loop_risk"
    RESOURCE_INTENSIVE = "resource_intensive"


class Severity(str, Enum):
    """Error severity. CRITICAL and HIGH block validity."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


BLOCKING_SEVERITIES: frozenset[str] = frozenset(
    {Severity.CRITICAL.value, Severity.HIGH.value}
)


class WarningImpact(str, Enum):
    """Area affected by a non-blocking warning."""

    PERFORMANCE = "performance"
    MAINTAINABILITY = "maintainability"
    USER_EXPERIENCE = "user-experience"
    COMPLIANCE = "compliance"


class ImprovementCategory(str, Enum):
    """Kind of improvement a suggestion offers."""

    EFFICIENCY = "efficiency"
    RELIABILITY = "reliability"
    USER_EXPERIENCE = "user-experience"
    BEST_PRACTICE = "best-practice"
    MAINTAINABILITY = "maintainability"


class SuggestionPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ComplexityLevel(str, Enum):
    """Workflow size class derived from node count."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"


class RiskLevel(str, Enum):
    """Risk derived from the worst error severity present."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# =============================================================================
# Validation Options
# =============================================================================


class ValidationOptions(BaseSchema):
    """Thresholds for the validator heuristics.

    Defaults come from application settings. A validator keeps one
    options instance for its whole lifetime.
    """

    model_config = ConfigDict(frozen=True)

    max_start_nodes: int = Field(
        default_factory=lambda: settings.MAX_START_NODES,
        ge=1,
        description="Start nodes allowed before MULTIPLE_START_NODES is raised",
    )
    large_workflow_nodes: int = Field(
        default_factory=lambda: settings.LARGE_WORKFLOW_NODES,
        ge=1,
        description="Node count above which a complexity warning is raised",
    )
    max_path_depth: int = Field(
        default_factory=lambda: settings.MAX_PATH_DEPTH,
        ge=1,
        description="Longest path (in nodes) above which a depth warning is raised",
    )
    subworkflow_suggestion_nodes: int = Field(
        default_factory=lambda: settings.SUBWORKFLOW_SUGGESTION_NODES,
        ge=1,
        description="Node count above which splitting into sub-workflows is suggested",
    )
    minutes_per_node: int = Field(
        default_factory=lambda: settings.MINUTES_PER_NODE,
        ge=0,
        description="Estimated execution minutes per node",
    )


# =============================================================================
# Findings
# =============================================================================


class ValidationFix(BaseSchema):
    """Remediation hint attached to an error.

    ``automated`` marks fixes that are safe to apply without user input.
    The validator never applies them itself.
    """

    model_config = ConfigDict(frozen=True)

    action: str = Field(..., description="Short action label")
    description: str = Field(..., description="What the fix does")
    automated: bool = Field(default=False, description="Safe to apply automatically")


class ValidationError(BaseSchema):
    """Single validation error."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Finding id, stable for a given graph")
    type: ValidationErrorType = Field(..., description="Error category")
    severity: Severity = Field(..., description="Error severity")
    message: str = Field(..., description="Short human-readable message")
    description: str = Field(..., description="Longer explanation")
    node_id: str | None = Field(default=None, description="Affected node id")
    edge_id: str | None = Field(default=None, description="Affected edge id")
    fix: ValidationFix | None = Field(default=None, description="Suggested fix")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured context",
    )


class ValidationWarning(BaseSchema):
    """Single validation warning (non-blocking)."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    message: str
    description: str
    node_id: str | None = None
    impact: WarningImpact


class ValidationSuggestion(BaseSchema):
    """Single improvement suggestion (non-blocking)."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    message: str
    description: str
    improvement: ImprovementCategory
    priority: SuggestionPriority


# =============================================================================
# Validation Result
# =============================================================================


class ValidationMetadata(BaseSchema):
    """Summary figures attached to every validation result."""

    model_config = ConfigDict(frozen=True)

    total_nodes: int = Field(..., ge=0, description="Number of nodes")
    total_edges: int = Field(..., ge=0, description="Number of edges")
    complexity: ComplexityLevel = Field(..., description="Size class")
    estimated_duration: int = Field(
        ...,
        ge=0,
        description="Rough execution estimate in minutes",
    )
    risk_level: RiskLevel = Field(..., description="Risk derived from errors")


class ValidationResult(BaseSchema):
    """Complete validation report."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool = Field(
        ...,
        description="True when no critical or high severity error was found",
    )
    score: int = Field(..., ge=0, le=100, description="Quality score 0-100")
    errors: tuple[ValidationError, ...] = Field(default=())
    warnings: tuple[ValidationWarning, ...] = Field(default=())
    suggestions: tuple[ValidationSuggestion, ...] = Field(default=())
    metadata: ValidationMetadata

    def errors_with_severity(self, *severities: Severity | str) -> list[ValidationError]:
        """Errors whose severity is one of ``severities``."""
        wanted = {Severity(s).value for s in severities}
        return [error for error in self.errors if error.severity in wanted]


# =============================================================================
# Response Wrappers
# =============================================================================


class QuickValidationResponse(BaseSchema):
    """Validity-only response."""

    is_valid: bool


class ValidationSummaryResponse(BaseSchema):
    """One-line summary response."""

    summary: str = Field(..., description="Human-readable one-line summary")
    is_valid: bool
    score: int = Field(..., ge=0, le=100)


__all__ = [
    "BLOCKING_SEVERITIES",
    "ComplexityLevel",
    "ImprovementCategory",
    "QuickValidationResponse",
    "RiskLevel",
    "Severity",
    "SuggestionPriority",
    "ValidationError",
    "ValidationErrorType",
    "ValidationFix",
    "ValidationMetadata",
    "ValidationOptions",
    "ValidationResult",
    "ValidationSuggestion",
    "ValidationSummaryResponse",
    "ValidationWarning",
    "WarningImpact",
]
