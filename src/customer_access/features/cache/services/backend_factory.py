"""Cache backend selection from settings."""

import logging

from ..adapters.memory_adapter import MemoryCacheBackend
from ..adapters.redis_adapter import RedisCacheBackend
from ..entities.protocols import CacheBackend
from ....config.settings import AccessSettings
from ....core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def create_cache_backend(settings: AccessSettings) -> CacheBackend:
    """Create the configured cache backend.

    Redis connects lazily on first use, so building the backend never touches
    the network.
    """
    if settings.uses_redis:
        if not settings.redis_url:
            raise ConfigurationError(
                "cache_backend is 'redis' but no redis_url is configured",
                details={"cache_backend": settings.cache_backend.value}
            )
        logger.info("Using Redis cache backend")
        return RedisCacheBackend(redis_url=settings.redis_url)

    logger.info("Using in-process memory cache backend")
    return MemoryCacheBackend(max_size=settings.cache_max_entries)
