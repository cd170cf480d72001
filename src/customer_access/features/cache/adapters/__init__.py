"""Cache backend adapters."""

from .memory_adapter import MemoryCacheBackend
from .redis_adapter import RedisCacheBackend

__all__ = ["MemoryCacheBackend", "RedisCacheBackend"]
