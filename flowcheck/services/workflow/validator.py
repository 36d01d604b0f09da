"""Workflow graph validation service.

This module provides the WorkflowValidator, which checks that a graph of
typed nodes and edges is a well-formed, executable business process.
It runs a fixed pipeline of independent passes over a read-only view
of the graph:

1. Structural: entry/exit topology, orphans, cycles
2. Connectivity: dangling edges, type compatibility, cardinality
3. Node configuration: required fields per node type
4. Business rules: pluggable domain rules
5. Performance: size and depth heuristics (warnings)
6. Suggestions: best-practice hints
7. Scoring and metadata

Defects are reported as data in the returned ValidationResult; the
validator never raises for a malformed workflow and never edits it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from flowcheck.core.logging import get_logger
from flowcheck.schemas.validation import (
    ImprovementCategory,
    Severity,
    SuggestionPriority,
    ValidationError,
    ValidationErrorType,
    ValidationFix,
    ValidationOptions,
    ValidationResult,
    ValidationSuggestion,
    ValidationWarning,
    WarningImpact,
)
from flowcheck.schemas.workflow import (
    ActionNodeData,
    ApprovalNodeData,
    DecisionNodeData,
    NodeType,
    WorkflowEdge,
    WorkflowNode,
)
from flowcheck.services.workflow.algorithms import GraphAlgorithms
from flowcheck.services.workflow.graph import WorkflowGraph
from flowcheck.services.workflow.rules import (
    DEFAULT_BUSINESS_RULES,
    BusinessRule,
    RuleCategory,
)
from flowcheck.services.workflow.scoring import (
    calculate_validation_score,
    generate_metadata,
    is_workflow_valid,
)

logger = get_logger(__name__)

NodeInput = WorkflowNode | Mapping[str, Any]
EdgeInput = WorkflowEdge | Mapping[str, Any]

# (source type, target type) pairs that may never be connected
INCOMPATIBLE_CONNECTIONS: frozenset[tuple[str, str]] = frozenset(
    {
        (NodeType.END.value, NodeType.START.value),
        (NodeType.END.value, NodeType.ACTION.value),
        (NodeType.END.value, NodeType.DECISION.value),
        (NodeType.END.value, NodeType.APPROVAL.value),
    }
)


def _is_blank(value: Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (int, float)):
        return not value
    return value is None


def _coerce_nodes(nodes: Iterable[NodeInput]) -> list[WorkflowNode]:
    return [
        node if isinstance(node, WorkflowNode) else WorkflowNode.model_validate(node)
        for node in nodes
    ]


def _coerce_edges(edges: Iterable[EdgeInput]) -> list[WorkflowEdge]:
    return [
        edge if isinstance(edge, WorkflowEdge) else WorkflowEdge.model_validate(edge)
        for edge in edges
    ]


class WorkflowValidator:
    """Stateless workflow graph validator.

    The instance holds only its thresholds and an ordered tuple of
    business rules, both fixed at construction. It is safe to share
    between callers and threads.

    Example:
        >>> validator = WorkflowValidator()
        >>> result = validator.validate(nodes, edges)
        >>> if result.is_valid:
        ...     print(f"Workflow is valid! Score: {result.score}")
    """

    def __init__(
        self,
        rules: Iterable[BusinessRule] | None = None,
        options: ValidationOptions | None = None,
    ) -> None:
        """Initialize the validator.

        Args:
            rules: Business rules to evaluate. Defaults to the shipped
                HR and finance approval rules.
            options: Heuristic thresholds. Defaults to application settings.
        """
        self._rules: tuple[BusinessRule, ...] = (
            DEFAULT_BUSINESS_RULES if rules is None else tuple(rules)
        )
        self._options = options or ValidationOptions()

    @property
    def rules(self) -> tuple[BusinessRule, ...]:
        return self._rules

    @property
    def options(self) -> ValidationOptions:
        return self._options

    def with_rules(self, *rules: BusinessRule) -> WorkflowValidator:
        """Return a new validator with ``rules`` appended to this one's."""
        return WorkflowValidator(rules=(*self._rules, *rules), options=self._options)

    def rules_for(self, category: RuleCategory | str) -> list[BusinessRule]:
        """Registered rules of one category, in registration order."""
        wanted = RuleCategory(category)
        return [rule for rule in self._rules if rule.category == wanted]

    # ==========================================================================
    # Public API
    # ==========================================================================

    def validate(
        self,
        nodes: Sequence[NodeInput],
        edges: Sequence[EdgeInput],
    ) -> ValidationResult:
        """Validate a workflow graph snapshot.

        Args:
            nodes: Workflow nodes (models or mappings with id, type, data).
            edges: Workflow edges (models or mappings with id, source, target).

        Returns:
            ValidationResult with errors, warnings, suggestions, score
            and metadata.
        """
        graph = WorkflowGraph.from_workflow(_coerce_nodes(nodes), _coerce_edges(edges))
        logger.debug(
            f"Validating workflow graph: {graph!r}",
            extra={
                "context": {
                    "node_count": graph.node_count,
                    "edge_count": graph.edge_count,
                    "rule_count": len(self._rules),
                }
            },
        )

        errors: list[ValidationError] = []
        errors.extend(self._validate_structure(graph))
        errors.extend(self._validate_connections(graph))
        errors.extend(self._validate_node_configurations(graph))
        errors.extend(self._validate_business_rules(graph))
        warnings = self._validate_performance(graph)
        suggestions = self._generate_suggestions(graph)

        result = ValidationResult(
            is_valid=is_workflow_valid(errors),
            score=calculate_validation_score(errors, warnings),
            errors=tuple(errors),
            warnings=tuple(warnings),
            suggestions=tuple(suggestions),
            metadata=generate_metadata(
                graph.node_count, graph.edge_count, errors, self._options
            ),
        )

        logger.info(
            f"Workflow validated: valid={result.is_valid}, score={result.score}",
            extra={
                "context": {
                    "is_valid": result.is_valid,
                    "score": result.score,
                    "error_count": len(result.errors),
                    "warning_count": len(result.warnings),
                    "suggestion_count": len(result.suggestions),
                    "risk_level": result.metadata.risk_level,
                }
            },
        )
        return result

    def validate_quick(
        self,
        nodes: Sequence[NodeInput],
        edges: Sequence[EdgeInput],
    ) -> bool:
        """Validate and return only whether the workflow is valid."""
        return self.validate(nodes, edges).is_valid

    def get_validation_summary(
        self,
        nodes: Sequence[NodeInput],
        edges: Sequence[EdgeInput],
    ) -> str:
        """Validate and return a one-line human-readable summary."""
        return summarize(self.validate(nodes, edges))

    # ==========================================================================
    # Validation Passes
    # ==========================================================================

    def _validate_structure(self, graph: WorkflowGraph) -> list[ValidationError]:
        """Entry/exit topology, orphans and cycles."""
        errors: list[ValidationError] = []

        start_nodes = graph.nodes_of_type(NodeType.START)
        if not start_nodes:
            errors.append(
                ValidationError(
                    id="struct-001",
                    type=ValidationErrorType.NO_START_NODE,
                    severity=Severity.CRITICAL,
                    message="No start node found",
                    description=(
                        "Every workflow must have at least one start node (trigger) "
                        "to begin execution."
                    ),
                    fix=ValidationFix(
                        action="Add a start node",
                        description=(
                            "Drag a trigger from the palette to create a workflow "
                            "entry point."
                        ),
                    ),
                )
            )
        elif len(start_nodes) > self._options.max_start_nodes:
            errors.append(
                ValidationError(
                    id="struct-002",
                    type=ValidationErrorType.MULTIPLE_START_NODES,
                    severity=Severity.MEDIUM,
                    message="Too many start nodes",
                    description=(
                        f"Having more than {self._options.max_start_nodes} start nodes "
                        "can make the workflow confusing and hard to maintain."
                    ),
                    details={"start_node_ids": [node.id for node in start_nodes]},
                )
            )

        has_end_node = bool(graph.nodes_of_type(NodeType.END))
        if not has_end_node and not GraphAlgorithms.find_terminal_nodes(graph):
            errors.append(
                ValidationError(
                    id="struct-003",
                    type=ValidationErrorType.NO_END_NODE,
                    severity=Severity.HIGH,
                    message="No end node or terminal path",
                    description=(
                        "Workflows should have clear termination points to prevent "
                        "infinite execution."
                    ),
                    fix=ValidationFix(
                        action="Add an end node",
                        description=(
                            "Add an end node or ensure some paths naturally terminate."
                        ),
                    ),
                )
            )

        orphaned = GraphAlgorithms.find_orphaned_nodes(graph)
        if orphaned:
            errors.append(
                ValidationError(
                    id="struct-004",
                    type=ValidationErrorType.ORPHANED_NODES,
                    severity=Severity.MEDIUM,
                    message=f"{len(orphaned)} orphaned nodes found",
                    description=(
                        "Orphaned nodes are not connected to the main workflow and "
                        "will never execute."
                    ),
                    node_id=orphaned[0].id,
                    fix=ValidationFix(
                        action="Connect or remove orphaned nodes",
                        description=(
                            "Either connect these nodes to the workflow or remove them."
                        ),
                    ),
                    details={"orphaned_node_ids": [node.id for node in orphaned]},
                )
            )

        cycles = GraphAlgorithms.detect_cycles(graph)
        if cycles:
            cycle_str = " -> ".join(cycles[0])
            errors.append(
                ValidationError(
                    id="struct-005",
                    type=ValidationErrorType.CIRCULAR_DEPENDENCY,
                    severity=Severity.HIGH,
                    message="Circular dependency detected",
                    description=(
                        "Circular dependencies can cause infinite loops and prevent "
                        f"workflow completion. Cycle: {cycle_str}"
                    ),
                    node_id=cycles[0][0],
                    fix=ValidationFix(
                        action="Remove circular dependencies",
                        description=(
                            "Add conditions or break points to prevent infinite loops."
                        ),
                    ),
                    details={"cycles": cycles},
                )
            )

        logger.debug(f"Structural pass found {len(errors)} errors")
        return errors

    def _validate_connections(self, graph: WorkflowGraph) -> list[ValidationError]:
        """Edge integrity, type compatibility and per-type cardinality."""
        errors: list[ValidationError] = []

        for edge in graph.edges:
            source_type = graph.node_type(edge.source)
            target_type = graph.node_type(edge.target)

            if source_type is None or target_type is None:
                errors.append(
                    ValidationError(
                        id=f"conn-{edge.id}",
                        type=ValidationErrorType.INVALID_CONNECTION,
                        severity=Severity.HIGH,
                        message="Invalid connection",
                        description="Connection references nodes that do not exist.",
                        edge_id=edge.id,
                        fix=ValidationFix(
                            action="Remove invalid connection",
                            description=(
                                "Remove this connection as it points to non-existent "
                                "nodes."
                            ),
                            automated=True,
                        ),
                        details={
                            "missing_node_ids": [
                                node_id
                                for node_id in (edge.source, edge.target)
                                if node_id not in graph
                            ]
                        },
                    )
                )
                continue

            if (source_type, target_type) in INCOMPATIBLE_CONNECTIONS:
                errors.append(
                    ValidationError(
                        id=f"conn-compat-{edge.id}",
                        type=ValidationErrorType.INVALID_CONNECTION,
                        severity=Severity.MEDIUM,
                        message="Incompatible node connection",
                        description=(
                            f"{source_type} nodes cannot connect directly to "
                            f"{target_type} nodes."
                        ),
                        edge_id=edge.id,
                    )
                )

        for node in graph:
            incoming = graph.get_in_degree(node.id)
            outgoing = graph.get_out_degree(node.id)

            if node.type == NodeType.START.value and incoming > 0:
                errors.append(
                    ValidationError(
                        id=f"conn-start-{node.id}",
                        type=ValidationErrorType.INVALID_CONNECTION,
                        severity=Severity.MEDIUM,
                        message="Start node has incoming connections",
                        description=(
                            "Start nodes should not have incoming connections as they "
                            "are workflow triggers."
                        ),
                        node_id=node.id,
                    )
                )

            if node.type != NodeType.START.value and incoming == 0:
                errors.append(
                    ValidationError(
                        id=f"conn-in-{node.id}",
                        type=ValidationErrorType.MISSING_CONNECTIONS,
                        severity=Severity.MEDIUM,
                        message="Node has no incoming connections",
                        description=(
                            "This node will never be reached during workflow execution."
                        ),
                        node_id=node.id,
                    )
                )

            if node.type == NodeType.END.value and outgoing > 0:
                errors.append(
                    ValidationError(
                        id=f"conn-end-{node.id}",
                        type=ValidationErrorType.INVALID_CONNECTION,
                        severity=Severity.MEDIUM,
                        message="End node has outgoing connections",
                        description=(
                            "End nodes should not have outgoing connections as they "
                            "terminate the workflow."
                        ),
                        node_id=node.id,
                    )
                )

        logger.debug(f"Connectivity pass found {len(errors)} errors")
        return errors

    def _validate_node_configurations(
        self, graph: WorkflowGraph
    ) -> list[ValidationError]:
        """Required configuration per node type, independent of graph shape."""
        errors: list[ValidationError] = []

        for node in graph:
            config = node.config

            if isinstance(config, ActionNodeData) and not config.action_id:
                errors.append(
                    self._missing_field_error(
                        node,
                        "action",
                        message="Action node missing action type",
                        description="Action nodes must specify which action to perform.",
                        fields=["actionId"],
                    )
                )
            elif isinstance(config, ApprovalNodeData) and not config.approver_role:
                errors.append(
                    self._missing_field_error(
                        node,
                        "approval",
                        message="Approval node missing approver role",
                        description=(
                            "Approval nodes must specify who can approve the request."
                        ),
                        fields=["approverRole"],
                    )
                )
            elif (
                isinstance(config, DecisionNodeData)
                and _is_blank(config.condition)
                and _is_blank(config.rules)
            ):
                errors.append(
                    self._missing_field_error(
                        node,
                        "decision",
                        message="Decision node missing logic",
                        description=(
                            "Decision nodes must have conditions or rules to make "
                            "decisions."
                        ),
                        fields=["condition", "rules"],
                    )
                )

            if not config.label:
                errors.append(
                    ValidationError(
                        id=f"config-label-{node.id}",
                        type=ValidationErrorType.MISSING_REQUIRED_FIELDS,
                        severity=Severity.LOW,
                        message="Node missing label",
                        description=(
                            "All nodes should have descriptive labels for better "
                            "workflow understanding."
                        ),
                        node_id=node.id,
                        details={"missing_fields": ["label"]},
                    )
                )

        logger.debug(f"Configuration pass found {len(errors)} errors")
        return errors

    @staticmethod
    def _missing_field_error(
        node: WorkflowNode,
        kind: str,
        message: str,
        description: str,
        fields: list[str],
    ) -> ValidationError:
        return ValidationError(
            id=f"config-{kind}-{node.id}",
            type=ValidationErrorType.MISSING_REQUIRED_FIELDS,
            severity=Severity.HIGH,
            message=message,
            description=description,
            node_id=node.id,
            details={"missing_fields": fields},
        )

    def _validate_business_rules(self, graph: WorkflowGraph) -> list[ValidationError]:
        """Run every registered business rule and concatenate the results."""
        errors: list[ValidationError] = []

        for rule in self._rules:
            rule_errors = rule(graph)
            if rule_errors:
                logger.debug(
                    f"Business rule {rule.id} ({rule.name}) reported "
                    f"{len(rule_errors)} errors"
                )
            errors.extend(rule_errors)

        return errors

    def _validate_performance(self, graph: WorkflowGraph) -> list[ValidationWarning]:
        """Size and depth heuristics. Warnings only."""
        warnings: list[ValidationWarning] = []

        if graph.node_count > self._options.large_workflow_nodes:
            warnings.append(
                ValidationWarning(
                    id="perf-001",
                    type="complexity",
                    message="Very complex workflow",
                    description=(
                        f"Workflows with more than {self._options.large_workflow_nodes} "
                        "nodes can be difficult to maintain and debug."
                    ),
                    impact=WarningImpact.MAINTAINABILITY,
                )
            )

        start_ids = [node.id for node in graph.nodes_of_type(NodeType.START)]
        max_depth = GraphAlgorithms.calculate_max_depth(graph, start_ids)
        if max_depth > self._options.max_path_depth:
            warnings.append(
                ValidationWarning(
                    id="perf-002",
                    type="depth",
                    message="Very deep workflow paths",
                    description=(
                        "Deep workflow paths can impact performance and user experience."
                    ),
                    impact=WarningImpact.PERFORMANCE,
                )
            )

        return warnings

    def _generate_suggestions(
        self, graph: WorkflowGraph
    ) -> list[ValidationSuggestion]:
        """Best-practice hints that never affect validity or score."""
        suggestions: list[ValidationSuggestion] = []

        if any(not node.config.description for node in graph):
            suggestions.append(
                ValidationSuggestion(
                    id="sug-001",
                    type="documentation",
                    message="Add descriptions to nodes",
                    description=(
                        "Adding descriptions helps team members understand the "
                        "workflow better."
                    ),
                    improvement=ImprovementCategory.MAINTAINABILITY,
                    priority=SuggestionPriority.MEDIUM,
                )
            )

        if graph.node_count > self._options.subworkflow_suggestion_nodes:
            suggestions.append(
                ValidationSuggestion(
                    id="sug-002",
                    type="organization",
                    message="Consider breaking into sub-workflows",
                    description=(
                        "Large workflows can be broken into smaller, reusable "
                        "sub-workflows."
                    ),
                    improvement=ImprovementCategory.MAINTAINABILITY,
                    priority=SuggestionPriority.MEDIUM,
                )
            )

        return suggestions


def summarize(result: ValidationResult) -> str:
    """One-line summary of a validation result."""
    if result.is_valid:
        return f"✅ Workflow is valid (Score: {result.score}/100)"

    critical = len(result.errors_with_severity(Severity.CRITICAL))
    high = len(result.errors_with_severity(Severity.HIGH))
    return f"❌ Workflow has issues: {critical} critical, {high} high severity errors"


# Shared instance; the validator holds no per-call state
workflow_validator = WorkflowValidator()


def validate_workflow(
    nodes: Sequence[NodeInput],
    edges: Sequence[EdgeInput],
) -> ValidationResult:
    """Validate with the shared validator."""
    return workflow_validator.validate(nodes, edges)


def validate_quick(nodes: Sequence[NodeInput], edges: Sequence[EdgeInput]) -> bool:
    """Validity-only check with the shared validator."""
    return workflow_validator.validate_quick(nodes, edges)


def get_validation_summary(
    nodes: Sequence[NodeInput],
    edges: Sequence[EdgeInput],
) -> str:
    """One-line summary with the shared validator."""
    return workflow_validator.get_validation_summary(nodes, edges)


__all__ = [
    "INCOMPATIBLE_CONNECTIONS",
    "WorkflowValidator",
    "get_validation_summary",
    "summarize",
    "validate_quick",
    "validate_workflow",
    "workflow_validator",
]
