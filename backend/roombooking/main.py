"""
RoomBooking Backend — FastAPI Application Factory
==================================================

What:  Builds and configures the FastAPI application.
How:   create_app() wires middleware, exception handlers and routers;
       `app` is the instance uvicorn serves (roombooking.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware:  Request ID → Access Log → Rate Limit       │
    │                                                          │
    │  Routes:                                                 │
    │  ┌────────┐ ┌────────┐ ┌───────────────┐ ┌─────────────┐ │
    │  │ /users │ │ /rooms │ │ /reservations │ │ /health     │ │
    │  └────────┘ └────────┘ └───────────────┘ └─────────────┘ │
    │                                                          │
    │  Docs: /apidoc (Swagger UI) · /apidoc-json · /redoc      │
    │                                                          │
    │  Exception Handlers:                                     │
    │  Validation→400 │ Forbidden→403 │ NotFound→404           │
    │  Conflict→409   │ Database→500                         │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config checks → optional table creation
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from roombooking import __version__
from roombooking.config import settings
from roombooking.database import create_tables, dispose_engine
from roombooking.exceptions import (
    ConflictError,
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    RoomBookingError,
    ValidationError,
)
from roombooking.middleware.logging import RequestLoggingMiddleware
from roombooking.middleware.rate_limit import RateLimitMiddleware
from roombooking.middleware.request_id import RequestIDMiddleware, request_id_var
from roombooking.routes import health, reservations, rooms, users
from roombooking.schemas.common import error_body

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure root logging once, before anything else logs.

    Format: 2030-07-10T10:00:00 [INFO] roombooking.services.room_service: Room 3 created ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our own access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if settings.log_level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup before the yield, shutdown after it."""
    setup_logging()
    logger.info("=" * 60)
    logger.info("RoomBooking Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    if settings.db_auto_create:
        await create_tables()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/apidoc", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("RoomBooking Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

        RequestValidationError  → 400 (schema: missing/typed fields, unknown fields)
        ValidationError         → 400 (business rule: time range)
        ForbiddenError          → 403
        NotFoundError           → 404
        ConflictError           → 409
        DatabaseError           → 500 (generic message; context logged)
        RoomBookingError        → 500
        Exception               → 500 (stack trace logged, never returned)
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = jsonable_encoder(exc.errors())
        logger.info("[%s] Request validation failed: %d error(s)", request_id_var.get(""), len(errors))
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", "Request validation failed", errors),
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        return JSONResponse(
            status_code=403,
            content=error_body("forbidden", exc.message, exc.context),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=error_body("not_found", exc.message, exc.context),
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return JSONResponse(
            status_code=409,
            content=error_body("conflict", exc.message, exc.context),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=error_body("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(RoomBookingError)
    async def handle_app_error(request: Request, exc: RoomBookingError):
        rid = request_id_var.get("")
        logger.error("[%s] Unhandled application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=error_body("server_error", exc.message),
        )

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
    """
    Assemble a fresh application instance.

    Tests call this directly so each one gets its own middleware state
    (rate-limit counters) and dependency overrides.
    """
    app = FastAPI(
        title="Meeting Room Reservation API",
        description=(
            "Manage users, meeting rooms and room reservations. "
            "Reservations of the same room may not overlap; only the reserver "
            "may change or cancel a reservation."
        ),
        version=__version__,
        docs_url="/apidoc",
        openapi_url="/apidoc-json",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Added innermost-first: execution order is the reverse of this list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(rooms.router)
    app.include_router(reservations.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console-script entry point: `roombooking`."""
    import uvicorn

    uvicorn.run(
        "roombooking.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
