"""Cache feature for customer-access.

- entities/: backend protocol
- adapters/: in-process memory and Redis backends
- services/: entity cache manager base and backend factory
- managers/: one cache manager per entity family
"""

from .entities.protocols import CacheBackend
from .adapters.memory_adapter import MemoryCacheBackend
from .adapters.redis_adapter import RedisCacheBackend
from .services.entity_cache_manager import EntityCacheManager
from .services.backend_factory import create_cache_backend
from .managers import (
    BranchCacheManager,
    CustomerCacheManager,
    EmployeeCacheManager,
    InvoiceCacheManager,
    PaymentCacheManager,
)

__all__ = [
    "CacheBackend",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "EntityCacheManager",
    "create_cache_backend",
    "BranchCacheManager",
    "CustomerCacheManager",
    "EmployeeCacheManager",
    "InvoiceCacheManager",
    "PaymentCacheManager",
]
