from typing import TYPE_CHECKING, AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

if TYPE_CHECKING:
    from lead_router.core.cache import CacheService

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from lead_router.main import app


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Yield an ``httpx.AsyncClient`` wired to the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def mock_redis_lock() -> MagicMock:
    """Return a lock object shaped like ``redis.asyncio.lock.Lock``."""
    lock = MagicMock()
    lock.acquire = AsyncMock(return_value=True)
    lock.release = AsyncMock()
    return lock


@pytest.fixture
def mock_redis(mock_redis_lock) -> AsyncMock:
    """Return an ``AsyncMock`` that behaves like ``redis.asyncio.Redis``."""
    redis = AsyncMock()
    redis.ping = AsyncMock()
    # Redis.lock() is a plain method returning a Lock
    redis.lock = MagicMock(return_value=mock_redis_lock)
    return redis


@pytest.fixture
def mock_cache(mock_redis) -> "CacheService":
    """Return a ``CacheService`` backed by the mock Redis client."""
    from lead_router.core.cache import CacheService

    return CacheService(redis_client=mock_redis)
