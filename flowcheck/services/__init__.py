"""Business logic services.

This package contains the workflow validation service.
"""

from flowcheck.services.workflow import WorkflowValidator, workflow_validator

__all__ = [
    "WorkflowValidator",
    "workflow_validator",
]
