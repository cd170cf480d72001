"""Cache protocols for customer-access.

The key/value backend is an external service (WordPress object cache,
Redis, ...). This module defines the uniform interface the entity cache
managers talk to.
"""

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """Key/value store with get/set/delete/expire semantics.

    Values are already serialized strings. Backends raise CacheError on
    failure; the managers turn that into a miss.
    """

    @property
    @abstractmethod
    def supports_pattern_delete(self) -> bool:
        """Whether delete_pattern() is a real wildcard delete.

        When False the managers emulate group clearing by tracking the keys
        they write per key type.
        """
        ...

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Get value by key, None on miss or expiry."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Set value with optional TTL in seconds."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete key and return whether it existed."""
        ...

    @abstractmethod
    async def expire(self, key: str, ttl: int) -> bool:
        """Set TTL for an existing key."""
        ...

    @abstractmethod
    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching a glob pattern, return count."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check backend health."""
        ...
