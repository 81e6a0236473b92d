"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (database engine).
Middleware, CORS, exception handlers and routers are all registered here.

Every error leaves the API in the same shape: {success: false, message}.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from debtbook import __version__
from debtbook.api import api_router
from debtbook.auth.jwt import TokenService
from debtbook.config import Settings, settings as default_settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: FastAPI lifespan replaces on_event("startup") / on_event("shutdown").
    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    config: Settings = app.state.settings
    logger.info(
        "debtbook.starting",
        version=__version__,
        environment=config.environment,
        port=config.port,
    )

    yield

    logger.info("debtbook.shutdown")

    from debtbook.db.engine import engine
    await engine.dispose()


def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def _validation_message(exc: RequestValidationError) -> str:
    """First validation problem, phrased for humans."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "missing":
        return "All fields are required"
    field = next(
        (str(part) for part in reversed(first.get("loc", ())) if isinstance(part, str)),
        "request",
    )
    return f"{field}: {first.get('msg', 'invalid value')}"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        return _error(400, _validation_message(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("debtbook.unhandled_error", path=request.url.path)
        return _error(500, "Internal server error")


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application.

    The token signer is derived from `config` here, once, and shared
    with request handlers through app.state.
    """
    config = config or default_settings

    app = FastAPI(
        title="Debtbook",
        description="Personal debt/credit ledger API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.tokens = TokenService.from_settings(config)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler

    from debtbook.middleware.request_id import RequestIdMiddleware
    from debtbook.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    # Mount API routes
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: debtbook.main:app)
app = create_app()
