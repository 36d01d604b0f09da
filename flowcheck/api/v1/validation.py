"""Validation API Router.

This module provides REST API endpoints for workflow graph validation.
The graph editor posts its current node/edge snapshot and receives the
full report, a validity flag, or a one-line summary.

Handlers are plain functions: validation is CPU-bound and FastAPI runs
them in its threadpool.
"""

from __future__ import annotations

from fastapi import APIRouter

from flowcheck.api.deps import AppSettings, Validator
from flowcheck.schemas.base import ErrorResponse
from flowcheck.schemas.validation import (
    QuickValidationResponse,
    ValidationResult,
    ValidationSummaryResponse,
)
from flowcheck.schemas.workflow import WorkflowGraphRequest
from flowcheck.services.workflow import ensure_graph_input_contract, summarize

router = APIRouter(prefix="/validation", tags=["validation"])

_INPUT_ERROR_RESPONSES = {
    413: {"model": ErrorResponse, "description": "Graph exceeds size limits"},
    422: {"model": ErrorResponse, "description": "Duplicate ids or malformed graph"},
}


def _ensure_input_contract(payload: WorkflowGraphRequest, settings: AppSettings) -> None:
    """Reject payloads outside the validator's input contract.

    Raises:
        GraphTooLargeError: Mapped to 413 by the application.
        DuplicateIdentifierError: Mapped to 422 by the application.
    """
    ensure_graph_input_contract(
        payload.nodes,
        payload.edges,
        max_nodes=settings.MAX_GRAPH_NODES,
        max_edges=settings.MAX_GRAPH_EDGES,
    )


# =============================================================================
# Validation Endpoints
# =============================================================================


@router.post(
    "/workflows",
    response_model=ValidationResult,
    summary="Validate Workflow Graph",
    description="Run every validation pass and return the full report.",
    responses=_INPUT_ERROR_RESPONSES,
)
def validate_workflow_graph(
    payload: WorkflowGraphRequest,
    validator: Validator,
    settings: AppSettings,
) -> ValidationResult:
    """Validate a workflow graph snapshot.

    Args:
        payload: Nodes and edges from the graph editor.
        validator: Shared validator (injected).
        settings: Application settings (injected).

    Returns:
        ValidationResult with errors, warnings, suggestions, score and metadata.
    """
    _ensure_input_contract(payload, settings)
    return validator.validate(payload.nodes, payload.edges)


@router.post(
    "/workflows/quick",
    response_model=QuickValidationResponse,
    summary="Quick Validity Check",
    description="Return only whether the workflow may be saved and activated.",
    responses=_INPUT_ERROR_RESPONSES,
)
def validate_workflow_quick(
    payload: WorkflowGraphRequest,
    validator: Validator,
    settings: AppSettings,
) -> QuickValidationResponse:
    """Validity-only check for save buttons and status badges."""
    _ensure_input_contract(payload, settings)
    return QuickValidationResponse(
        is_valid=validator.validate_quick(payload.nodes, payload.edges)
    )


@router.post(
    "/workflows/summary",
    response_model=ValidationSummaryResponse,
    summary="Validation Summary",
    description="Return a one-line human-readable validation summary.",
    responses=_INPUT_ERROR_RESPONSES,
)
def validate_workflow_summary(
    payload: WorkflowGraphRequest,
    validator: Validator,
    settings: AppSettings,
) -> ValidationSummaryResponse:
    """One-line summary plus the figures it is based on."""
    _ensure_input_contract(payload, settings)
    result = validator.validate(payload.nodes, payload.edges)
    return ValidationSummaryResponse(
        summary=summarize(result),
        is_valid=result.is_valid,
        score=result.score,
    )


__all__ = ["router"]
