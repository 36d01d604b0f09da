"""Workflow graph validation package.

Components:
- WorkflowGraph: Read-only adjacency view over a workflow snapshot
- GraphAlgorithms: Cycle detection, reachability, depth analysis
- BusinessRule: Pluggable domain rule descriptors
- WorkflowValidator: Validation pipeline, scoring and metadata
- Graph input exceptions: Caller-contract violations

Example:
    >>> from flowcheck.services.workflow import WorkflowValidator
    >>> validator = WorkflowValidator()
    >>> result = validator.validate(nodes, edges)
    >>> validator.get_validation_summary(nodes, edges)
    '✅ Workflow is valid (Score: 96/100)'
"""

from flowcheck.services.workflow.algorithms import GraphAlgorithms
from flowcheck.services.workflow.exceptions import (
    DuplicateIdentifierError,
    GraphInputError,
    GraphTooLargeError,
)
from flowcheck.services.workflow.graph import WorkflowGraph, ensure_graph_input_contract
from flowcheck.services.workflow.rules import (
    DEFAULT_BUSINESS_RULES,
    BusinessRule,
    RuleCategory,
)
from flowcheck.services.workflow.validator import (
    WorkflowValidator,
    get_validation_summary,
    summarize,
    validate_quick,
    validate_workflow,
    workflow_validator,
)

__all__ = [
    # Data structures
    "WorkflowGraph",
    "ensure_graph_input_contract",
    # Algorithms
    "GraphAlgorithms",
    # Rules
    "BusinessRule",
    "DEFAULT_BUSINESS_RULES",
    "RuleCategory",
    # Validator
    "WorkflowValidator",
    "get_validation_summary",
    "summarize",
    "validate_quick",
    "validate_workflow",
    "workflow_validator",
    # Exceptions
    "DuplicateIdentifierError",
    "GraphInputError",
    "GraphTooLargeError",
]
