"""API-specific test fixtures."""

from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


@pytest.fixture
def db_url(tmp_path) -> str:
    """File-backed SQLite URL so the TestClient loop and assertions see the same data."""
    return f"sqlite+aiosqlite:///{tmp_path / 'paid_users.db'}"


@pytest.fixture
def api_client(db_url):
    """FastAPI test client backed by a throwaway SQLite database.

    Initializes the global database via init_db inside the TestClient's
    own event loop so route handlers can use get_session_factory().
    """
    from starlette.exceptions import HTTPException as StarletteHTTPException

    from paid_users.api.routes import api_router
    from paid_users.core.config import get_settings
    from paid_users.db import close_db, init_db
    from paid_users.main import generic_exception_handler, http_exception_handler
    from paid_users.middleware.correlation import setup_correlation_middleware

    @asynccontextmanager
    async def test_lifespan(app: FastAPI):
        """Test lifespan - initialize DB in TestClient's event loop."""
        # Reset global so init_db creates a fresh engine in THIS loop
        import paid_users.db.base as db_mod

        db_mod._engine = None
        db_mod._session_factory = None
        await init_db(db_url)
        yield
        await close_db()

    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Paid Users Webhook - Test Client",
        version="0.1.0",
        lifespan=test_lifespan,
    )

    setup_correlation_middleware(app)

    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")

    with TestClient(app) as client:
        yield client
