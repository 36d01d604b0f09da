"""Pydantic schemas for workflow graph snapshots.

These models describe the node/edge structure produced by the visual
graph editor. The validator only reads them.

Each node carries a free-form ``data`` bag. ``WorkflowNode.config``
exposes that bag as a typed variant chosen by node type, so the
configuration checks can read ``config.action_id`` instead of poking
into a dictionary. Node types without a dedicated variant fall back to
``GenericNodeData``, which keeps every key it was given.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field, PrivateAttr, ValidationError, model_validator

from flowcheck.schemas.base import BaseSchema


class NodeType(str, Enum):
    """Node types the validator has dedicated rules for.

    The vocabulary is open: nodes may carry any other type string.
    """

    START = "start"
    END = "end"
    ACTION = "action"
    DECISION = "decision"
    APPROVAL = "approval"


# =============================================================================
# Node data variants
# =============================================================================


class NodeData(BaseSchema):
    """Fields shared by every node data variant."""

    model_config = ConfigDict(extra="allow")

    label: str | None = None
    description: str | None = None
    category: str | None = None


class ActionNodeData(NodeData):
    """Configuration of an ``action`` node."""

    action_id: str | None = None


class ApprovalNodeData(NodeData):
    """Configuration of an ``approval`` node."""

    approver_role: str | None = None


class DecisionNodeData(NodeData):
    """Configuration of a ``decision`` node (``condition`` or ``rules``)."""

    condition: Any = None
    rules: Any = None


class GenericNodeData(NodeData):
    """Configuration of a node type without dedicated checks."""


NODE_DATA_VARIANTS: dict[str, type[NodeData]] = {
    NodeType.ACTION.value: ActionNodeData,
    NodeType.APPROVAL.value: ApprovalNodeData,
    NodeType.DECISION.value: DecisionNodeData,
}


def parse_node_data(node_type: str, data: dict[str, Any]) -> NodeData:
    """Resolve a raw data bag into the variant for ``node_type``."""
    variant = NODE_DATA_VARIANTS.get(node_type, GenericNodeData)
    return variant.model_validate(data)


# =============================================================================
# Graph elements
# =============================================================================


class WorkflowNode(BaseSchema):
    """A graph vertex: trigger, action, decision, approval or terminator."""

    id: str = Field(..., min_length=1, description="Unique node id")
    type: str = Field(..., description="Node type tag (start, end, action, ...)")
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Type-specific configuration",
        examples=[{"label": "Notify HR", "actionId": "hr_notify"}],
    )

    _config: NodeData = PrivateAttr()

    @model_validator(mode="before")
    @classmethod
    def default_missing_data(cls, value: Any) -> Any:
        """Treat ``data: null`` the same as an absent data bag."""
        if isinstance(value, dict) and value.get("data") is None:
            return {**value, "data": {}}
        return value

    @model_validator(mode="after")
    def resolve_config(self) -> WorkflowNode:
        """Parse the data bag into its typed variant once."""
        try:
            self._config = parse_node_data(self.type, self.data)
        except ValidationError as exc:
            raise ValueError(f"invalid data for {self.type} node {self.id}: {exc}") from exc
        return self

    @property
    def config(self) -> NodeData:
        """Typed view of ``data`` for this node's type."""
        return self._config


class WorkflowEdge(BaseSchema):
    """A directed control-flow transition between two nodes."""

    id: str = Field(..., min_length=1, description="Unique edge id")
    source: str = Field(..., description="Source node id")
    target: str = Field(..., description="Target node id")


class WorkflowGraphRequest(BaseSchema):
    """Graph snapshot submitted for validation."""

    nodes: list[WorkflowNode] = Field(
        default_factory=list,
        description="Workflow nodes",
    )
    edges: list[WorkflowEdge] = Field(
        default_factory=list,
        description="Workflow edges",
    )


__all__ = [
    "ActionNodeData",
    "ApprovalNodeData",
    "DecisionNodeData",
    "GenericNodeData",
    "NODE_DATA_VARIANTS",
    "NodeData",
    "NodeType",
    "WorkflowEdge",
    "WorkflowGraphRequest",
    "WorkflowNode",
    "parse_node_data",
]
