"""
Fleet Management API — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn fleet_api.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware:  Request ID → Logging → GZip → CORS         │
    │                                                          │
    │  Routes:  /api/auth   /api/trajectories   /api/taxis     │
    │           /api/emails                     /health        │
    │                                                          │
    │  Exception Handlers:                                     │
    │    FleetManagementError → its status_code / error_code   │
    │    Exception            → 500 (generic message)          │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check (logged, not fatal)
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from fleet_api import __version__
from fleet_api.config import settings
from fleet_api.database import dispose_engine
from fleet_api.exceptions import DatabaseError, FleetManagementError
from fleet_api.middleware.logging import RequestLoggingMiddleware
from fleet_api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from fleet_api.routes import auth, emails, health, taxis, trajectories

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2024-03-01T12:00:00 [INFO] fleet_api.services.auth_service: message
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("Fleet Management API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: health checks and read endpoints still work
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Fleet Management API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(error: str, message: str, details=None) -> dict:
    body = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the application exception hierarchy onto JSON error responses.

    Every FleetManagementError subclass carries its own status_code and
    error_code. Internal details of DatabaseError and of unexpected
    exceptions are logged, never returned.
    """

    @app.exception_handler(FleetManagementError)
    async def handle_application_error(request: Request, exc: FleetManagementError):
        rid = request_id_var.get("")
        status = exc.status_code

        if isinstance(exc, DatabaseError):
            logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
            content = error_body(exc.error_code, "An internal error occurred. Please try again later.")
        else:
            if status >= 500:
                logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
            else:
                logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
            content = error_body(exc.error_code, exc.message, exc.context)

        headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
        return JSONResponse(status_code=status, content=content, headers=headers)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Fleet Management API",
        description=(
            "Taxi fleet backend: trajectory queries, latest positions, "
            "spreadsheet exports by email and token-based authentication."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Executed in reverse order of addition: RequestID runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(trajectories.router)
    app.include_router(taxis.router)
    app.include_router(emails.router)
    app.include_router(health.router)

    return app


app = create_app()
