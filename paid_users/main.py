"""Paid Users Webhook: FastAPI application entry point."""

import signal
import threading
import uuid
from contextlib import asynccontextmanager

# CRITICAL ORDER: configure_structlog MUST be called before all other app imports
# (structlog caches the processor chain on first use).
from paid_users.core.logging import configure_structlog
from paid_users.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
)

import stripe
import structlog

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from paid_users.api.routes import api_router
from paid_users.core.config import get_settings
from paid_users.db import close_db, init_db
from paid_users.middleware.correlation import (
    get_correlation_id,
    setup_correlation_middleware,
)

logger = structlog.get_logger(__name__)


def validate_webhook_config() -> None:
    """Fail fast if the Stripe credentials are missing at startup."""
    settings = get_settings()
    if settings.debug:
        return  # Skip in dev/test mode
    required = {
        "stripe_secret_key": settings.stripe_secret_key,
        "stripe_webhook_secret": settings.stripe_webhook_secret,
    }
    missing = [k for k, v in required.items() if not v]
    if missing:
        raise RuntimeError(f"Missing Stripe configuration at startup: {missing}")


def configure_stripe() -> None:
    """Configure the stripe module with the secret key, once per process."""
    stripe.api_key = get_settings().stripe_secret_key


def install_sigterm_handler(app: FastAPI) -> None:
    """Flip app.state.shutting_down on SIGTERM, then defer to the previous handler.

    The server (uvicorn) installs its own exit handler before the lifespan
    runs; it must still fire or the process never exits.
    """
    # signal handlers can only be installed from the main thread
    if threading.current_thread() is not threading.main_thread():
        return

    previous = signal.getsignal(signal.SIGTERM)

    def handle_sigterm(signum, frame):
        app.state.shutting_down = True
        logger.info("sigterm_received", action="health_check_503_draining_connections")
        if callable(previous):
            previous(signum, frame)

    signal.signal(signal.SIGTERM, handle_sigterm)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # SIGTERM flips this so the health check returns 503 while connections drain
    app.state.shutting_down = False
    install_sigterm_handler(app)

    settings = get_settings()
    logger.info("startup_begin", app_name=settings.app_name, debug=settings.debug)

    validate_webhook_config()
    configure_stripe()
    logger.info("stripe_configured")

    await init_db()
    logger.info("db_initialized")

    yield

    logger.info("shutdown_begin")
    await close_db()
    logger.info("shutdown_complete")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Global handler for HTTP errors raised by routing or by route handlers.

    Logs errors server-side with full context, returns a sanitized body.
    """
    if exc.status_code == 405:
        return JSONResponse(
            status_code=405,
            content={"error": "Method not allowed"},
            headers=exc.headers,
        )

    debug_id = str(uuid.uuid4())

    logger.error(
        "http_exception",
        status_code=exc.status_code,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        detail=exc.detail,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "debug_id": debug_id},
        headers=exc.headers,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global handler for unhandled errors: logs the traceback, returns a generic 500."""
    debug_id = str(uuid.uuid4())

    logger.error(
        "unhandled_exception",
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content={"error": "Server error", "debug_id": debug_id},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Grants paid-user entitlement from Stripe checkout webhooks",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Correlation ID middleware (runs first on incoming requests)
    setup_correlation_middleware(app)

    # Exception handlers
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "paid_users.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
