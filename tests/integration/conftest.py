"""Integration-test fixtures.

Require a migrated PostgreSQL (`alembic upgrade head`) and Redis reachable at
DATABASE_URL / REDIS_URL. All tests share one event loop so the module-level
SQLAlchemy engine pool and Redis pool stay valid for the whole session.
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from flow_helpers import create_auction, create_user
from src.main import app


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client: keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session")
async def bidders() -> dict[str, str]:
    """Three fresh users keyed by label."""
    return {label: await create_user(label) for label in ("alice", "bob", "carol")}


@pytest_asyncio.fixture(loop_scope="session")
async def auction_product() -> str:
    return await create_auction()
