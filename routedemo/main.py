"""
RouteDemo: FastAPI Application Factories
========================================

What:  Builds the two demonstration apps: the hello service and the upload service.
How:   `build_app()` assembles the shared defaults (logging middleware, request
       IDs, exception handlers); `create_hello_app()` and `create_upload_app()`
       add their routes on top.
Who:   Served by uvicorn (`uvicorn routedemo.main:hello_app`) or the console
       scripts in routedemo.cli.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐                   │
    │  │ Req ID   │→│  Logging        │                   │
    │  └──────────┘ └─────────────────┘                   │
    │                                                     │
    │  Routes (hello):        Routes (upload):            │
    │  GET /ping, /pingping   POST /upload                │
    │  GET /p/*segs  (501)                                │
    │  GET /ping/:seg (501)                               │
    │  GET /v1/get   (501)                                │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ TooLarge→413 │ Unimpl→501   │   │
    │  │ Storage→500    │ anything else→500           │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Log the route table (METHOD pattern --> handler)
    3. Upload service only: ensure the upload directory exists
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Callable, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from routedemo import __version__
from routedemo.config import settings
from routedemo.exceptions import (
    FileStorageError,
    PayloadTooLargeError,
    UnimplementedRouteError,
    ValidationError,
)
from routedemo.middleware.logging import RequestLoggingMiddleware
from routedemo.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from routedemo.routes.hello import register_hello_routes
from routedemo.routes.upload import register_upload_routes
from routedemo.routing import RouteGroup
from routedemo.services.upload_service import UploadService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] routedemo.access: GET /ping 200 0.4ms [...]
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # RequestLoggingMiddleware already writes one line per request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


def log_route_table(app: FastAPI) -> None:
    """
    Log every route registered through `app.state.routes` as
    `METHOD pattern --> handler`, patterns in colon/star notation.
    """
    routes: RouteGroup = app.state.routes
    for entry in routes.entries:
        logger.info("%-6s %-25s --> %s", entry.method, entry.pattern, entry.handler_name)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def hello_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("%s %s starting (variant %d)", app.title, __version__, app.state.variant)
    log_route_table(app)
    logger.info("Listening on http://%s:%d", settings.host, settings.port)

    yield

    logger.info("%s shut down.", app.title)


@asynccontextmanager
async def upload_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("%s %s starting", app.title, __version__)
    log_route_table(app)

    upload_dir = Path(app.state.upload_service.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory: %s", upload_dir.resolve())
    logger.info("Listening on http://%s:%d", settings.host, settings.port)

    yield

    logger.info("%s shut down.", app.title)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP status codes and the error envelope.

    Handler hierarchy:
        ValidationError          → 400 Bad Request
        PayloadTooLargeError     → 413 Payload Too Large
        UnimplementedRouteError  → 501 Not Implemented
        FileStorageError         → 500 Internal Server Error
        Exception (fallback)     → 500 Internal Server Error

    Server-side details (paths, OS errors, stack traces) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent invalid input; tell them what is wrong."""
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(PayloadTooLargeError)
    async def handle_payload_too_large(request: Request, exc: PayloadTooLargeError):
        rid = request_id_var.get("")
        logger.warning("[%s] Upload rejected: %s", rid, exc.message)
        return JSONResponse(
            status_code=413,
            content={
                "error": "payload_too_large",
                "message": exc.message,
                "details": {"max_size": exc.max_size},
                "request_id": rid,
            },
        )

    @app.exception_handler(UnimplementedRouteError)
    async def handle_unimplemented(request: Request, exc: UnimplementedRouteError):
        """A placeholder route matched; report it as such, not as a crash."""
        rid = request_id_var.get("")
        logger.warning("[%s] %s (path %s)", rid, exc.message, request.url.path)
        return JSONResponse(
            status_code=501,
            content={
                "error": "not_implemented",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        """File system error: generic message, details logged."""
        rid = request_id_var.get("")
        logger.error("[%s] File storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Recovery layer: any unhandled exception becomes a generic 500."""
        rid = request_id_var.get("") or getattr(request.state, "request_id", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
            # Runs outside the request ID middleware, so the header is set here
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factories
# ══════════════════════════════════════════════════════════════════════════

def build_app(title: str, lifespan: Callable, description: str = "") -> FastAPI:
    """
    Create a FastAPI app carrying the defaults both services share.

    Middleware executes in reverse order of addition, so RequestIDMiddleware
    (added last) runs before RequestLoggingMiddleware.
    """
    app = FastAPI(
        title=title,
        description=description,
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)
    return app


def create_hello_app(variant: Optional[int] = None) -> FastAPI:
    """
    Create the hello service.

    Args:
        variant: Route layout (1 or 2); defaults to settings.hello_variant.
    """
    variant = variant or settings.hello_variant

    app = build_app(
        title="RouteDemo Hello",
        lifespan=hello_lifespan,
        description="Ping routes, route groups, and parameter / wildcard placeholders.",
    )

    router = APIRouter(tags=["Hello"])
    routes = register_hello_routes(RouteGroup(router), variant)
    app.include_router(router)

    app.state.variant = variant
    app.state.routes = routes
    return app


def create_upload_app(upload_dir: Optional[str] = None, max_size: Optional[int] = None) -> FastAPI:
    """
    Create the upload service.

    Args:
        upload_dir: Directory uploads are written into; defaults to settings.upload_dir.
        max_size:   Upload size limit in bytes; defaults to settings.max_upload_size
                    (unset means no limit).
    """
    app = build_app(
        title="RouteDemo Upload",
        lifespan=upload_lifespan,
        description="Single-file multipart upload stored under its original filename.",
    )

    app.state.upload_service = UploadService(upload_dir=upload_dir, max_size=max_size)
    router = APIRouter(tags=["Upload"])
    app.state.routes = register_upload_routes(RouteGroup(router))
    app.include_router(router)
    return app


# ── Application Instances ────────────────────────────────────────────────
# uvicorn imports these as routedemo.main:hello_app / routedemo.main:upload_app
hello_app = create_hello_app()
upload_app = create_upload_app()
