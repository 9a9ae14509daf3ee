"""
Think Tank Content Platform

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from thinktank.api.middleware.request_id import RequestIdMiddleware
from thinktank.api.v1 import router as api_v1_router
from thinktank.config import get_settings
from thinktank.database import close_db, init_db
from thinktank.kernel.errors import DomainError
from thinktank.logging_config import configure_logging, get_logger
from thinktank.schemas.common import HealthResponse

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown tasks.
    """
    # Configure logging first
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    logger.info("Starting %s v%s", settings.project_name, settings.version)
    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.project_name,
    description="""
    Think Tank Content Platform

    Public site and member submission API for a policy think tank.

    ## Features

    - **Publications**: Research, briefs and commentary with a review workflow
    - **Policies & Case Studies**: Policy library with supporting case studies
    - **Events & Initiatives**: Event calendar and programme listings
    - **Search**: Site-wide search across published content
    - **Memberships**: Membership applications and approval
    - **Admin**: Moderation queue, direct authoring, user management, audit trail

    ## Content rules

    1. Published records are public; drafts, pending and rejected records are
       visible to their author and admins only.
    2. Status changes follow draft -> pending_review -> published | rejected,
       and rejected -> draft.
    3. Every mutation is recorded in the audit log.
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# Middleware order: add_middleware stacks innermost-first, so LAST added = OUTERMOST.
# CORS must be outermost so every response, including errors, carries its headers.
_cors_origins = list(settings.cors_origins)

app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _cors_headers(request: Request) -> dict:
    """CORS headers for error responses (500s often bypass CORS middleware)."""
    if not _cors_origins:
        return {}
    origin = request.headers.get("origin") or ""
    allow_origin = origin if origin in _cors_origins else _cors_origins[0]
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "*",
        "Access-Control-Allow-Headers": "*",
    }


def _error_response(request: Request, status_code: int, content: dict, headers: dict = None) -> JSONResponse:
    headers = {**_cors_headers(request), **(headers or {})}
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        headers["X-Request-ID"] = req_id
    content["request_id"] = req_id
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    """Render domain errors with their mapped status and stable code."""
    if exc.status_code >= 500:
        logger.warning("Upstream failure: %s", exc.detail, extra={"code": exc.code})
    return _error_response(request, exc.status_code, exc.to_dict())


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """401/403 from the auth dependencies and 404 for unknown routes."""
    content = {"detail": exc.detail}
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        content["code"] = "auth/unauthenticated"
    elif exc.status_code == status.HTTP_403_FORBIDDEN:
        content["code"] = "auth/forbidden"
    elif exc.status_code == status.HTTP_404_NOT_FOUND:
        content["code"] = "resource/not_found"
    return _error_response(request, exc.status_code, content, getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Handle request validation errors in the same shape as domain validation."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })
    return _error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        {"detail": "Validation error", "code": "validation/invalid", "errors": errors},
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception: %s", exc)
    if settings.debug:
        content = {"detail": str(exc), "type": type(exc).__name__}
    else:
        content = {"detail": "Internal server error"}
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, content)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check application health."""
    return HealthResponse(status="ok", version=settings.version, database="connected")


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.project_name,
        "version": settings.version,
        "docs": "/docs" if settings.debug else "disabled",
        "api": {
            "v1": settings.api_v1_prefix,
        },
    }


app.include_router(
    api_v1_router,
    prefix=settings.api_v1_prefix,
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "thinktank.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
