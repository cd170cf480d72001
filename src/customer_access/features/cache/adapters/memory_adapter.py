"""In-process memory cache backend for customer-access.

Behaves like a per-process object cache: TTL expiry, LRU eviction and, by
default, no wildcard deletion.
"""

import asyncio
import fnmatch
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class MemoryCacheEntry:
    """Memory cache entry with expiry."""
    value: str
    created_at: float
    expires_at: Optional[float] = None

    @property
    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return time.time() > self.expires_at

    @property
    def ttl(self) -> Optional[int]:
        """Remaining TTL in seconds."""
        if self.expires_at is None:
            return None
        return max(0, int(self.expires_at - time.time()))

    def update_ttl(self, ttl: int) -> None:
        if ttl > 0:
            self.expires_at = time.time() + ttl
        else:
            self.expires_at = None


class MemoryCacheBackend:
    """Memory cache backend with LRU eviction and TTL support."""

    def __init__(self, max_size: int = 10000, supports_pattern_delete: bool = False):
        """Initialize memory backend.

        Args:
            max_size: Maximum number of entries before LRU eviction
            supports_pattern_delete: Advertise wildcard deletion to the managers.
                Off by default, matching object caches that only delete by key.
        """
        self.max_size = max_size
        self._supports_pattern_delete = supports_pattern_delete
        self._store: Dict[str, MemoryCacheEntry] = {}
        self._access_order: "OrderedDict[str, None]" = OrderedDict()
        self._lock = asyncio.Lock()

    @property
    def supports_pattern_delete(self) -> bool:
        return self._supports_pattern_delete

    async def get(self, key: str) -> Optional[str]:
        """Get value by key."""
        async with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None

            if entry.is_expired:
                self._remove_entry(key)
                return None

            self._access_order.move_to_end(key)
            return entry.value

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Set key-value pair with optional TTL."""
        async with self._lock:
            if key in self._store:
                self._remove_entry(key)

            expires_at = time.time() + ttl if ttl and ttl > 0 else None
            self._ensure_capacity()
            self._store[key] = MemoryCacheEntry(
                value=value,
                created_at=time.time(),
                expires_at=expires_at
            )
            self._access_order[key] = None

    async def delete(self, key: str) -> bool:
        """Delete key and return whether it existed."""
        async with self._lock:
            if key in self._store:
                expired = self._store[key].is_expired
                self._remove_entry(key)
                return not expired
            return False

    async def exists(self, key: str) -> bool:
        """Check if key exists (and not expired)."""
        return await self.get(key) is not None

    async def expire(self, key: str, ttl: int) -> bool:
        """Set TTL for existing key."""
        async with self._lock:
            entry = self._store.get(key)
            if entry is None or entry.is_expired:
                return False
            entry.update_ttl(ttl)
            return True

    async def ttl(self, key: str) -> Optional[int]:
        """Get remaining TTL for key."""
        async with self._lock:
            entry = self._store.get(key)
            if entry is None or entry.is_expired:
                return None
            return entry.ttl

    async def keys(self, pattern: str = "*") -> List[str]:
        """Get live keys matching a glob pattern."""
        async with self._lock:
            self._cleanup_expired()
            return [key for key in self._store if fnmatch.fnmatchcase(key, pattern)]

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching a glob pattern."""
        async with self._lock:
            matched = [key for key in self._store if fnmatch.fnmatchcase(key, pattern)]
            for key in matched:
                self._remove_entry(key)
            return len(matched)

    async def clear(self) -> None:
        """Clear all cache entries."""
        async with self._lock:
            self._store.clear()
            self._access_order.clear()

    async def size(self) -> int:
        """Number of live entries."""
        async with self._lock:
            self._cleanup_expired()
            return len(self._store)

    async def health_check(self) -> bool:
        return True

    def _remove_entry(self, key: str) -> None:
        self._store.pop(key, None)
        self._access_order.pop(key, None)

    def _cleanup_expired(self) -> None:
        expired = [key for key, entry in self._store.items() if entry.is_expired]
        for key in expired:
            self._remove_entry(key)

    def _ensure_capacity(self) -> None:
        if len(self._store) < self.max_size:
            return

        self._cleanup_expired()
        while len(self._store) >= self.max_size and self._access_order:
            oldest_key, _ = self._access_order.popitem(last=False)
            self._store.pop(oldest_key, None)
            logger.debug(f"Evicted cache key {oldest_key}")
