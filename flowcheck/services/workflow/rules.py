"""Business rules evaluated against whole workflow graphs.

A business rule is a named, categorised predicate over the graph that
returns the errors it finds. Rules are plain descriptors: the validator
receives an ordered collection of them at construction and runs each
one on every validation. Adding a rule (or a whole new category) means
passing another descriptor, never editing the rule pass.

Example:
    >>> rule = BusinessRule(
    ...     id="sec-001",
    ...     name="No anonymous approvals",
    ...     description="Approvals must name a role",
    ...     category=RuleCategory.SECURITY,
    ...     severity=Severity.HIGH,
    ...     validate=check_approver_roles,
    ... )
    >>> validator = WorkflowValidator().with_rules(rule)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from flowcheck.schemas.validation import Severity, ValidationError, ValidationErrorType
from flowcheck.schemas.workflow import NodeType, WorkflowNode
from flowcheck.services.workflow.algorithms import GraphAlgorithms
from flowcheck.services.workflow.graph import WorkflowGraph

RuleCheck = Callable[[WorkflowGraph], list[ValidationError]]


class RuleCategory(str, Enum):
    """Business domain a rule belongs to."""

    HR = "hr"
    FINANCE = "finance"
    OPERATIONS = "operations"
    COMPLIANCE = "compliance"
    SECURITY = "security"


@dataclass(frozen=True, slots=True)
class BusinessRule:
    """Descriptor of a pluggable business rule.

    Attributes:
        id: Stable rule id (e.g. "hr-001").
        name: Display name.
        description: What the rule enforces.
        category: Business domain of the rule.
        severity: Severity of the errors the rule reports.
        validate: Pure function from graph to the errors found.
    """

    id: str
    name: str
    description: str
    category: RuleCategory
    severity: Severity
    validate: RuleCheck

    def __call__(self, graph: WorkflowGraph) -> list[ValidationError]:
        return self.validate(graph)


def _action_id(node: WorkflowNode) -> str:
    action_id = node.data.get("actionId", node.data.get("action_id"))
    return action_id if isinstance(action_id, str) else ""


def _category(node: WorkflowNode) -> str | None:
    return node.config.category


def is_hr_action(node: WorkflowNode) -> bool:
    """Node tagged as HR by category or by its action id."""
    return _category(node) == RuleCategory.HR.value or "hr" in _action_id(node)


def is_finance_action(node: WorkflowNode) -> bool:
    """Node tagged as an expense/finance action."""
    return "expense" in _action_id(node) or _category(node) == RuleCategory.FINANCE.value


def check_hr_approval_chain(graph: WorkflowGraph) -> list[ValidationError]:
    """Every HR action needs an approval node downstream."""
    errors: list[ValidationError] = []

    for node in graph:
        if not is_hr_action(node):
            continue
        if GraphAlgorithms.has_downstream_node_type(graph, node.id, NodeType.APPROVAL):
            continue
        errors.append(
            ValidationError(
                id=f"hr-approval-{node.id}",
                type=ValidationErrorType.APPROVAL_CHAIN_BROKEN,
                severity=Severity.HIGH,
                message="HR action missing approval step",
                description="HR actions require approval before execution for compliance.",
                node_id=node.id,
            )
        )

    return errors


def check_expense_approval(graph: WorkflowGraph) -> list[ValidationError]:
    """Every financial action needs an approval node downstream."""
    errors: list[ValidationError] = []

    for node in graph:
        if not is_finance_action(node):
            continue
        if GraphAlgorithms.has_downstream_node_type(graph, node.id, NodeType.APPROVAL):
            continue
        errors.append(
            ValidationError(
                id=f"fin-approval-{node.id}",
                type=ValidationErrorType.COMPLIANCE_VIOLATION,
                severity=Severity.HIGH,
                message="Financial action requires approval",
                description=(
                    "All financial actions must include approval step for audit compliance."
                ),
                node_id=node.id,
            )
        )

    return errors


HR_APPROVAL_CHAIN = BusinessRule(
    id="hr-001",
    name="HR Approval Chain",
    description="HR workflows must include proper approval chain",
    category=RuleCategory.HR,
    severity=Severity.HIGH,
    validate=check_hr_approval_chain,
)

EXPENSE_APPROVAL_LIMITS = BusinessRule(
    id="fin-001",
    name="Expense Approval Limits",
    description="Financial workflows must respect approval limits",
    category=RuleCategory.FINANCE,
    severity=Severity.HIGH,
    validate=check_expense_approval,
)

DEFAULT_BUSINESS_RULES: tuple[BusinessRule, ...] = (
    HR_APPROVAL_CHAIN,
    EXPENSE_APPROVAL_LIMITS,
)


__all__ = [
    "DEFAULT_BUSINESS_RULES",
    "EXPENSE_APPROVAL_LIMITS",
    "HR_APPROVAL_CHAIN",
    "BusinessRule",
    "RuleCategory",
    "RuleCheck",
    "check_expense_approval",
    "check_hr_approval_chain",
    "is_finance_action",
    "is_hr_action",
]
