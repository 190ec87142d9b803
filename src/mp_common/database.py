"""Async engine and session factories.

The HTTP app uses the lazily created module-level engine. Operator commands
build their own engine with `create_engine()` and pass sessions explicitly.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings
from src.mp_common.errors import ConfigurationError

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def create_engine(database_url: str | None, echo: bool = False) -> AsyncEngine:
    """Build an engine for *database_url*. Raises ConfigurationError if unset."""
    if not database_url:
        raise ConfigurationError("DATABASE_URL", "set DATABASE_URL or DATABASE")
    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=5,
        max_overflow=5,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def get_engine() -> AsyncEngine:
    """Get or create the application engine from settings."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is None:
        _engine = create_engine(settings.DATABASE_URL, echo=settings.DEBUG)
        _session_factory = create_session_factory(_engine)
    return _engine


async def dispose_engine() -> None:
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request."""
    get_engine()
    assert _session_factory is not None
    async with _session_factory() as session:
        yield session
