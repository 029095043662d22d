"""Store fixtures: a throwaway SQLite database wired into the global session factory."""

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from paid_users.db.base import Base


@pytest.fixture
async def engine(tmp_path) -> AsyncEngine:
    """Create a SQLite test engine and point get_session_factory() at it."""
    import paid_users.db.base as db_mod

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}", echo=False)

    # Import all models so metadata is populated
    import paid_users.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    db_mod._engine = engine
    db_mod._session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    yield engine

    db_mod._engine = None
    db_mod._session_factory = None
    await engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncSession:
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
