"""Cache services."""

from .backend_factory import create_cache_backend
from .entity_cache_manager import EntityCacheManager

__all__ = ["EntityCacheManager", "create_cache_backend"]
