"""Integration-test fixtures.

Pre-condition: a PostgreSQL database migrated with `alembic upgrade head`,
reachable through DATABASE_URL. Without it every integration test is skipped.

All integration tests share a single event loop so the asyncpg pool stays
valid across the session.
"""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from config.settings import settings
from src.main import app
from src.mp_common.database import create_engine, create_session_factory


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if settings.DATABASE_URL:
        return
    skip = pytest.mark.skip(reason="DATABASE_URL not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def engine() -> AsyncIterator[AsyncEngine]:
    eng = create_engine(settings.DATABASE_URL)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture(loop_scope="session")
async def db(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Session whose rows are removed afterwards (test wallets only)."""
    async with create_session_factory(engine)() as session:
        yield session
        await session.execute(
            text("DELETE FROM piece_holdings WHERE item_id LIKE 'it-%'")
        )
        await session.execute(text("DELETE FROM nfts WHERE item_id LIKE 'it-%'"))
        await session.execute(text("DELETE FROM lazy_nfts WHERE id LIKE 'it-%'"))
        await session.commit()


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncIterator[AsyncClient]:  # type: ignore[override]
    """Session-scoped async HTTP client; keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
