"""Redis cache backend for customer-access."""

import logging
from typing import List, Optional

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from ....core.exceptions import CacheError, CacheConnectionError

logger = logging.getLogger(__name__)

# Keys deleted per DEL command during pattern deletion
DELETE_BATCH_SIZE = 500


class RedisCacheBackend:
    """Redis cache backend using redis.asyncio.

    Shared between processes, so decisions and lists cached by one worker are
    visible to (and invalidated for) every other worker.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        client: Optional[Redis] = None,
        socket_timeout: float = 5.0,
    ):
        if client is None and not redis_url:
            raise CacheConnectionError("Either redis_url or client is required")

        self.redis_url = redis_url
        self.socket_timeout = socket_timeout
        self.redis_client: Optional[Redis] = client
        self._connected = client is not None

    @property
    def supports_pattern_delete(self) -> bool:
        return True

    async def connect(self) -> None:
        """Connect to Redis."""
        if self._connected:
            return

        try:
            self.redis_client = redis.from_url(
                self.redis_url,
                decode_responses=True,
                socket_timeout=self.socket_timeout,
                socket_connect_timeout=self.socket_timeout,
            )
            await self.redis_client.ping()
            self._connected = True
            logger.info("Connected to Redis cache backend")
        except (RedisError, OSError) as e:
            self.redis_client = None
            raise CacheConnectionError(f"Failed to connect to Redis: {e}")

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self.redis_client:
            try:
                await self.redis_client.aclose()
            except RedisError as e:
                logger.error(f"Error closing Redis connection: {e}")
            finally:
                self.redis_client = None
                self._connected = False

    async def get(self, key: str) -> Optional[str]:
        """Get value by key."""
        await self._ensure_connected()

        try:
            return await self.redis_client.get(key)
        except RedisError as e:
            raise CacheError(f"Redis get error for key {key}: {e}")

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Set key-value pair with optional TTL."""
        await self._ensure_connected()

        try:
            await self.redis_client.set(key, value, ex=ttl if ttl and ttl > 0 else None)
        except RedisError as e:
            raise CacheError(f"Redis set error for key {key}: {e}")

    async def delete(self, key: str) -> bool:
        """Delete key and return whether it existed."""
        await self._ensure_connected()

        try:
            return await self.redis_client.delete(key) > 0
        except RedisError as e:
            raise CacheError(f"Redis delete error for key {key}: {e}")

    async def expire(self, key: str, ttl: int) -> bool:
        """Set TTL for existing key."""
        await self._ensure_connected()

        try:
            return bool(await self.redis_client.expire(key, ttl))
        except RedisError as e:
            raise CacheError(f"Redis expire error for key {key}: {e}")

    async def keys(self, pattern: str = "*") -> List[str]:
        """Get keys matching pattern."""
        await self._ensure_connected()

        try:
            return [key async for key in self.redis_client.scan_iter(match=pattern)]
        except RedisError as e:
            raise CacheError(f"Redis keys error with pattern {pattern}: {e}")

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern.

        Args:
            pattern: Redis glob pattern (e.g. "customer_access:wp_customer_branch:branch_list:*")

        Returns:
            Number of keys deleted
        """
        await self._ensure_connected()

        deleted = 0
        batch: List[str] = []
        try:
            async for key in self.redis_client.scan_iter(match=pattern):
                batch.append(key)
                if len(batch) >= DELETE_BATCH_SIZE:
                    deleted += await self.redis_client.delete(*batch)
                    batch = []
            if batch:
                deleted += await self.redis_client.delete(*batch)
            return deleted
        except RedisError as e:
            raise CacheError(f"Redis delete pattern error for {pattern}: {e}")

    async def health_check(self) -> bool:
        """Check Redis health."""
        try:
            await self._ensure_connected()
            await self.redis_client.ping()
            return True
        except (CacheError, RedisError) as e:
            logger.error(f"Redis health check failed: {e}")
            return False

    async def _ensure_connected(self) -> None:
        if not self._connected:
            await self.connect()
