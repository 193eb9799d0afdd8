"""
Atomsmiths Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │ Req ID   │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────┐ ┌──────────────────────┐    │
    │  │ /api/atomsmiths_db │ │ /api/members, events │    │
    │  │ _api?action=...    │ │ blogs, dashboard     │    │
    │  └────────────────────┘ └──────────────────────┘    │
    │  ┌────────────────────┐ ┌──────────────────────┐    │
    │  │ POST /api/join     │ │ GET /health          │    │
    │  └────────────────────┘ └──────────────────────┘    │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ NotFound→404 │ Method→405 │       │
    │  Conflict→409   │ DB→500       │ other→500          │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Ping MongoDB with retries and ensure indexes (logged, not fatal)

    Shutdown:
    1. Close the cached MongoDB client
"""

import logging
import sys
import traceback
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import settings
from app.database import close_client, connect_with_retry, ensure_indexes
from app.exceptions import (
    ConflictError,
    DatabaseError,
    InvalidActionError,
    MethodNotAllowedError,
    NotFoundError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import blogs, dashboard, dispatch, events, health, join, members

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Run initialization on startup and cleanup on shutdown.

    A database that is down at startup is logged but does not stop the
    server: /health reports it, and requests fail with 500 until it is back.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Atomsmiths Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    try:
        await connect_with_retry()
    except PyMongoError as e:
        logger.error("MongoDB unavailable at startup: %s", str(e))
    else:
        try:
            failed = await ensure_indexes()
        except PyMongoError as e:
            logger.error("Index setup interrupted: %s", str(e))
        else:
            if failed:
                logger.warning("MongoDB ready without indexes on: %s", ", ".join(failed))
            else:
                logger.info("MongoDB ready (db=%s)", settings.mongodb_db)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Atomsmiths Backend shutting down...")
    close_client()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build the shared error body: {ok: false, error, message, details?, request_id}."""
    content: Dict[str, Any] = {"ok": False, "error": error, "message": message}
    if details:
        content["details"] = details
    content["request_id"] = request_id_var.get("")
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        RequestValidationError  → 400 Bad Request (query/body schema errors)
        InvalidActionError      → 400 Bad Request
        NotFoundError           → 404 Not Found
        MethodNotAllowedError   → 405 Method Not Allowed (with Allow header)
        ConflictError           → 409 Conflict
        DatabaseError           → 500 Internal Server Error (generic message)
        HTTPException           → its own status (unknown paths, etc.)
        Exception (fallback)    → 500 Internal Server Error

    Stack traces are only returned when ENVIRONMENT=development.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = [str(part) for part in first.get("loc", ())]
        field = ".".join(part for part in location if part not in ("body", "query", "path"))
        message = first.get("msg", "Invalid request")
        if field:
            message = f"Invalid value for '{field}': {message}"
        logger.warning("[%s] Request validation error: %s", request_id_var.get(""), message)
        return error_response(400, "validation_error", message, {"field": field} if field else None)

    @app.exception_handler(InvalidActionError)
    async def handle_invalid_action(request: Request, exc: InvalidActionError):
        return error_response(400, "invalid_action", exc.message, exc.context)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, "not_found", exc.message)

    @app.exception_handler(MethodNotAllowedError)
    async def handle_method_not_allowed(request: Request, exc: MethodNotAllowedError):
        headers = {"Allow": ", ".join(exc.allowed)} if exc.allowed else None
        return error_response(405, "method_not_allowed", exc.message, headers=headers)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.info("[%s] Conflict: %s", request_id_var.get(""), exc.message)
        return error_response(409, "conflict", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return error_response(
            500,
            "server_error",
            "An internal error occurred. Please try again later.",
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return error_response(
            exc.status_code,
            "http_error",
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        details = None
        if settings.is_development:
            details = {
                "type": type(exc).__name__,
                "traceback": traceback.format_exception(type(exc), exc, exc.__traceback__),
            }
        message = "An unexpected error occurred. Please try again."
        if settings.is_development:
            message = str(exc) or message
        return error_response(500, "internal_server_error", message, details)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Atomsmiths Club API",
        description=(
            "Membership, events, blogs and dashboard statistics for the Atomsmiths club site, "
            "backed by MongoDB."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → route

    # "*" with credentials disabled makes Starlette answer with a wildcard;
    # an explicit list is echoed back per matching origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(dispatch.router)
    app.include_router(members.router)
    app.include_router(events.router)
    app.include_router(blogs.router)
    app.include_router(dashboard.router)
    app.include_router(join.router)
    app.include_router(health.router)

    return app


app = create_app()
