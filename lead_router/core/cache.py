import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class CacheService:
    """Thin wrapper around an async Redis client.

    If *redis_client* is ``None`` (Redis unavailable), every operation
    degrades to a no-op; callers never need to check for ``None``.
    """

    def __init__(self, redis_client: Optional[Redis] = None) -> None:
        self._redis: Optional[Redis] = redis_client

    # ------------------------------------------------------------------
    # Distributed lock, used to serialise routing per company
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def lock(
        self,
        key: str,
        timeout: int,
        blocking_timeout: Optional[float] = None,
    ) -> AsyncIterator[bool]:
        """Hold a Redis lock on *key* for the duration of the block.

        Yields ``True`` when the lock was acquired.  Yields ``False``
        (and runs the block unguarded) when Redis is unavailable or the
        lock could not be taken within *blocking_timeout*.
        """
        if self._redis is None:
            yield False
            return

        redis_lock = self._redis.lock(
            key, timeout=timeout, blocking_timeout=blocking_timeout
        )
        try:
            acquired = bool(await redis_lock.acquire())
        except Exception:
            logger.warning("Redis LOCK failed for key %s", key)
            acquired = False

        try:
            yield acquired
        finally:
            if acquired:
                try:
                    await redis_lock.release()
                except Exception:
                    logger.warning("Redis UNLOCK failed for key %s", key)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def is_available(self) -> bool:
        """Return ``True`` if a Redis client is configured."""
        return self._redis is not None
