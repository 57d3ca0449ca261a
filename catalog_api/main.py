"""
Product Catalog API: FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers and routers;
       `app` is the module-level instance uvicorn serves
       (uvicorn catalog_api.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware: CORS → RequestID → Logging → RateLimit → GZip│
    │                                                          │
    │  Routes:  /auth  /users  /categories  /products  /health │
    │                                                          │
    │  Per-route pipeline:                                     │
    │    authenticate → require_role → schema validation → handler
    │                                                          │
    │  Exception Handlers:                                     │
    │    Validation→400  Auth→401  Role→403  NotFound→404      │
    │    Database→500    Exception→500                         │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, config check, database ping (failures logged only)
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Iterable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog_api import __version__
from catalog_api.config import settings
from catalog_api.database import dispose_engine, ping_database
from catalog_api.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CatalogError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from catalog_api.middleware.logging import RequestLoggingMiddleware
from catalog_api.middleware.rate_limit import RateLimitMiddleware
from catalog_api.middleware.request_id import RequestIDMiddleware, request_id_var
from catalog_api.routes import auth, categories, health, products, users

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "An unexpected error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, before anything else logs.

    Format: 2024-01-15T12:00:00 [INFO] catalog.access: GET /categories/ 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # RequestLoggingMiddleware replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup and shutdown.

    Neither a configuration problem nor an unreachable database stops the
    server: both are logged, and affected requests fail at the store layer
    with a 500 until the database comes back.
    """
    setup_logging()
    logger.info("Product Catalog API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    await ping_database()

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("API docs: http://%s:%d/api-docs", settings.host, settings.port)

    yield

    logger.info("Product Catalog API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def format_validation_errors(errors: Iterable[dict]) -> str:
    """
    Join every schema violation into one readable string.

    Each entry is "<field>: <message>", where <field> is the dotted location
    without its leading "body"/"query"/"path" segment, e.g.
    "variants.0.quantity: Input should be greater than or equal to 0".
    """
    messages = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        field = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return ", ".join(messages)


def _server_error_message(exc: Exception) -> str:
    """The 500 body text: raw error only when EXPOSE_ERROR_DETAILS is on."""
    if not settings.expose_error_details:
        return GENERIC_SERVER_ERROR
    if isinstance(exc, CatalogError):
        return str(exc.context.get("original_error", exc.message))
    return str(exc) or GENERIC_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and the {"error": ...} body.

        RequestValidationError  → 400 {"error": "Validation failed", "details": ...}
        ValidationError         → 400
        AuthenticationError     → 401 (+ WWW-Authenticate: Bearer)
        AuthorizationError      → 403
        NotFoundError           → 404
        DatabaseError           → 500
        HTTPException           → its own status (unknown routes, 405s)
        Exception               → 500
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        from_query = bool(errors) and all(e.get("loc") and e["loc"][0] == "query" for e in errors)
        details = format_validation_errors(errors)
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), details)
        return JSONResponse(
            status_code=400,
            content={
                "error": "Query validation failed" if from_query else "Validation failed",
                "details": details,
            },
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        content = {"error": exc.message}
        if exc.details:
            content["details"] = exc.details
        return JSONResponse(status_code=400, content=content)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=401,
            content={"error": exc.message},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(AuthorizationError)
    async def handle_authorization_error(request: Request, exc: AuthorizationError):
        logger.info(
            "[%s] Forbidden: %s requires role %s",
            request_id_var.get(""),
            request.url.path,
            exc.required_role,
        )
        return JSONResponse(status_code=403, content={"error": exc.message})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(status_code=500, content={"error": _server_error_message(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"error": _server_error_message(exc)})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Build a fully configured application.

    Each call returns a fresh instance with its own middleware state (for
    example the rate-limit windows), which the test suite relies on.
    """
    app = FastAPI(
        title="Product Catalog API",
        description=(
            "A RESTful API for managing product catalogs with authentication, "
            "inventory tracking, and reporting features."
        ),
        version=__version__,
        docs_url="/api-docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition: CORS is outermost so
    # that 429 rejections carry the CORS headers too
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "X-Request-ID",
            "X-Total-Count",
            "RateLimit-Limit",
            "RateLimit-Remaining",
            "RateLimit-Reset",
            "Retry-After",
        ],
    )

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(categories.router)
    app.include_router(products.router)

    return app


app = create_app()
