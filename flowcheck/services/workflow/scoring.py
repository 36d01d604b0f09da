"""Scoring and metadata aggregation for validation results.

The score starts at 100 and loses a fixed penalty per finding:

    critical error  -20
    high error      -10
    medium error     -5
    low error        -2
    warning          -2

Suggestions never cost points. The result is clamped at 0.
"""

from __future__ import annotations

from collections.abc import Sequence

from flowcheck.schemas.validation import (
    BLOCKING_SEVERITIES,
    ComplexityLevel,
    RiskLevel,
    Severity,
    ValidationError,
    ValidationMetadata,
    ValidationOptions,
    ValidationWarning,
)

MAX_SCORE = 100
WARNING_PENALTY = 2

SEVERITY_PENALTIES: dict[str, int] = {
    Severity.CRITICAL.value: 20,
    Severity.HIGH.value: 10,
    Severity.MEDIUM.value: 5,
    Severity.LOW.value: 2,
}

# (exclusive lower bound on node count, class), checked in order
COMPLEXITY_BUCKETS: tuple[tuple[int, ComplexityLevel], ...] = (
    (30, ComplexityLevel.VERY_HIGH),
    (15, ComplexityLevel.HIGH),
    (5, ComplexityLevel.MEDIUM),
)


def calculate_validation_score(
    errors: Sequence[ValidationError],
    warnings: Sequence[ValidationWarning],
) -> int:
    """Quality score in the range 0-100."""
    deductions = sum(SEVERITY_PENALTIES.get(error.severity, 0) for error in errors)
    deductions += len(warnings) * WARNING_PENALTY
    return max(0, MAX_SCORE - deductions)


def is_workflow_valid(errors: Sequence[ValidationError]) -> bool:
    """True when no error blocks saving or activating the workflow."""
    return not any(error.severity in BLOCKING_SEVERITIES for error in errors)


def classify_complexity(node_count: int) -> ComplexityLevel:
    for lower_bound, level in COMPLEXITY_BUCKETS:
        if node_count > lower_bound:
            return level
    return ComplexityLevel.LOW


def assess_risk(errors: Sequence[ValidationError]) -> RiskLevel:
    """Risk level from the worst severity present."""
    severities = {error.severity for error in errors}
    if Severity.CRITICAL.value in severities:
        return RiskLevel.HIGH
    if Severity.HIGH.value in severities:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def generate_metadata(
    node_count: int,
    edge_count: int,
    errors: Sequence[ValidationError],
    options: ValidationOptions,
) -> ValidationMetadata:
    """Build the metadata block of a validation result.

    Args:
        node_count: Number of nodes in the snapshot.
        edge_count: Number of edges in the snapshot, dangling ones included.
        errors: All errors found.
        options: Thresholds in effect (minutes per node).

    Returns:
        ValidationMetadata for the result.
    """
    return ValidationMetadata(
        total_nodes=node_count,
        total_edges=edge_count,
        complexity=classify_complexity(node_count),
        # Linear estimate, not a simulation
        estimated_duration=node_count * options.minutes_per_node,
        risk_level=assess_risk(errors),
    )


__all__ = [
    "COMPLEXITY_BUCKETS",
    "SEVERITY_PENALTIES",
    "WARNING_PENALTY",
    "assess_risk",
    "calculate_validation_score",
    "classify_complexity",
    "generate_metadata",
    "is_workflow_valid",
]
