"""FastAPI application for the workflow validator.

Serves the validation routes under ``/api/v1``. Graph defects come back
as data in a 200 response; only payloads outside the input contract are
turned into error responses here:

    GraphTooLargeError         -> 413
    DuplicateIdentifierError   -> 422

Run with ``uvicorn flowcheck.main:app``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from flowcheck import __version__
from flowcheck.api import router as api_router
from flowcheck.core.config import settings
from flowcheck.core.logging import get_logger, setup_logging
from flowcheck.schemas.base import ErrorResponse
from flowcheck.services.workflow import (
    GraphInputError,
    GraphTooLargeError,
    workflow_validator,
)

setup_logging(
    log_level=settings.LOG_LEVEL,
    log_file=settings.LOG_FILE,
    service_name=settings.PROJECT_NAME,
    enable_json=settings.LOG_JSON_FORMAT,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:  # noqa: ARG001 - Required by FastAPI lifespan interface
    """Log the active limits and rules on startup, and the shutdown."""
    logger.info(
        f"Starting {settings.PROJECT_NAME}",
        extra={
            "context": {
                "action": "application_startup",
                "version": __version__,
                "debug": settings.DEBUG,
                "max_graph_nodes": settings.MAX_GRAPH_NODES,
                "max_graph_edges": settings.MAX_GRAPH_EDGES,
                "business_rules": [rule.id for rule in workflow_validator.rules],
                "options": workflow_validator.options.model_dump(),
            }
        },
    )
    yield
    logger.info(
        f"Shutting down {settings.PROJECT_NAME}",
        extra={"context": {"action": "application_shutdown"}},
    )


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Static validation, scoring and suggestions for workflow graphs",
    version=__version__,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.exception_handler(GraphInputError)
async def graph_input_error_handler(request: Request, exc: GraphInputError) -> JSONResponse:
    """Turn a rejected graph payload into an ErrorResponse."""
    if isinstance(exc, GraphTooLargeError):
        status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    else:
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    logger.warning(
        f"Rejected workflow graph: {exc.message}",
        extra={
            "context": {
                "path": request.url.path,
                "error_code": exc.error_code,
                "status_code": status_code,
                **exc.details,
            }
        },
    )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=exc.error_code,
            message=exc.message,
            details=exc.details,
        ).model_dump(),
    )


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "healthy"}


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Service name, version and docs location."""
    return {
        "name": settings.PROJECT_NAME,
        "version": __version__,
        "docs": "/docs",
    }
