"""API dependencies.

Common dependencies for API routes: the shared validator and settings.
"""

from typing import Annotated

from fastapi import Depends

from flowcheck.core.config import Settings, get_settings
from flowcheck.services.workflow import WorkflowValidator, workflow_validator


def get_validator() -> WorkflowValidator:
    """Return the shared validator.

    The validator keeps no per-call state, so one instance serves every
    request. Tests override this dependency to inject custom rules.
    """
    return workflow_validator


Validator = Annotated[WorkflowValidator, Depends(get_validator)]
"""Type alias for validator dependency injection.

Usage:
    @router.post("/check")
    def check(payload: WorkflowGraphRequest, validator: Validator):
        return validator.validate(payload.nodes, payload.edges)
"""

AppSettings = Annotated[Settings, Depends(get_settings)]


__all__ = [
    "AppSettings",
    "Validator",
    "get_validator",
]
