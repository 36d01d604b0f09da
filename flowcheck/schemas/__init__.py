"""Pydantic schemas for workflow graphs and validation reports.

Exports all schemas for convenient importing.
"""

from flowcheck.schemas.base import BaseSchema, ErrorResponse
from flowcheck.schemas.validation import (
    ComplexityLevel,
    ImprovementCategory,
    QuickValidationResponse,
    RiskLevel,
    Severity,
    SuggestionPriority,
    ValidationError,
    ValidationErrorType,
    ValidationFix,
    ValidationMetadata,
    ValidationOptions,
    ValidationResult,
    ValidationSuggestion,
    ValidationSummaryResponse,
    ValidationWarning,
    WarningImpact,
)
from flowcheck.schemas.workflow import (
    ActionNodeData,
    ApprovalNodeData,
    DecisionNodeData,
    GenericNodeData,
    NodeData,
    NodeType,
    WorkflowEdge,
    WorkflowGraphRequest,
    WorkflowNode,
)

__all__ = [
    # Base
    "BaseSchema",
    "ErrorResponse",
    # Workflow graph
    "ActionNodeData",
    "ApprovalNodeData",
    "DecisionNodeData",
    "GenericNodeData",
    "NodeData",
    "NodeType",
    "WorkflowEdge",
    "WorkflowGraphRequest",
    "WorkflowNode",
    # Validation
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
