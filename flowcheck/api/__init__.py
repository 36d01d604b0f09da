"""HTTP layer for the workflow validator.

``router`` carries every versioned route already mounted under its
prefix, so the application includes it as-is.
"""

from fastapi import APIRouter

from flowcheck.api.v1 import router as v1_router
from flowcheck.core.config import settings

router = APIRouter(prefix=settings.API_V1_PREFIX)
router.include_router(v1_router)

__all__ = ["router"]
