"""Base class for per-entity cache managers.

Each manager owns one cache group namespace, a default TTL and a fixed set
of key types. Keys have the shape::

    {key_prefix}:{cache_group}:{key_type}[:{part}...]

Values are JSON serialized before they reach the backend. ``None`` is never
stored; a ``None`` from ``get`` always means miss.

Clearing a whole key type uses the backend's wildcard delete when it has
one. Otherwise every key written through the manager is recorded in a
per-type index entry, and ``clear`` deletes the recorded keys. Index updates
are last-writer-wins across processes, so a key lost from the index lives
until its TTL.

Every public operation converts backend failures into a miss or a no-op and
logs them. Invalidation is therefore safe on a cold or unreachable cache.
"""

import asyncio
import hashlib
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Tuple

from ..entities.protocols import CacheBackend
from ....config.constants import CacheKeyTypes
from ....core.exceptions import CacheSerializationError

logger = logging.getLogger(__name__)

INDEX_KEY_TYPE = "_index"


class EntityCacheManager(ABC):
    """Keyed cache for one entity family with group invalidation."""

    CACHE_GROUP: ClassVar[str] = ""
    CACHE_EXPIRY: ClassVar[int] = 0
    ENTITY_NAME: ClassVar[str] = ""
    KNOWN_CACHE_TYPES: ClassVar[Tuple[str, ...]] = ()

    def __init__(
        self,
        backend: CacheBackend,
        key_prefix: str = "customer_access",
        default_ttl: Optional[int] = None,
        cache_group: Optional[str] = None,
    ):
        self.backend = backend
        self.key_prefix = key_prefix
        self.cache_group = cache_group or self.CACHE_GROUP
        self.default_ttl = default_ttl or self.CACHE_EXPIRY

        if not self.cache_group or self.default_ttl <= 0 or not self.KNOWN_CACHE_TYPES:
            raise ValueError(
                f"{self.__class__.__name__} must declare a cache group, a positive TTL "
                f"and its known cache types"
            )

        self._known_types = frozenset(self.KNOWN_CACHE_TYPES)
        self._index_lock = asyncio.Lock()
        self._max_ttl_seen = self.default_ttl

    # Keys

    def build_key(self, key_type: str, *parts: Any) -> str:
        """Build the full backend key for a key type and its parts."""
        if key_type not in self._known_types and key_type != INDEX_KEY_TYPE:
            raise ValueError(f"Unknown cache type '{key_type}' for {self.cache_group}")

        key = f"{self.key_prefix}:{self.cache_group}:{key_type}"
        for part in parts:
            key += f":{part}"
        return key

    def _index_key(self, key_type: str) -> str:
        return self.build_key(INDEX_KEY_TYPE, key_type)

    # Serialization

    @staticmethod
    def _serialize(value: Any) -> str:
        try:
            return json.dumps(value, default=str, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise CacheSerializationError(f"Value is not JSON serializable: {e}")

    @staticmethod
    def _deserialize(raw: str) -> Any:
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            raise CacheSerializationError(f"Cached value is not valid JSON: {e}")

    # Basic operations

    async def get(self, key_type: str, *parts: Any) -> Optional[Any]:
        """Get a cached value, None on miss or backend failure."""
        key = self.build_key(key_type, *parts)
        try:
            raw = await self.backend.get(key)
            if raw is None:
                logger.debug(f"Cache miss: {key}")
                return None
            return self._deserialize(raw)
        except Exception as e:
            logger.warning(f"Cache get failed for {key}, treating as miss: {e}")
            return None

    async def set(self, key_type: str, value: Any, *parts: Any, ttl: Optional[int] = None) -> bool:
        """Cache a value under a key type and parts.

        Returns False when the value is None or the backend fails.
        """
        if value is None:
            return False

        key = self.build_key(key_type, *parts)
        effective_ttl = ttl or self.default_ttl
        try:
            await self.backend.set(key, self._serialize(value), effective_ttl)
            if not self.backend.supports_pattern_delete:
                await self._track(key_type, key, effective_ttl)
            return True
        except Exception as e:
            logger.warning(f"Cache set failed for {key}: {e}")
            return False

    async def delete(self, key_type: str, *parts: Any) -> bool:
        """Delete one key, False when absent or on backend failure."""
        key = self.build_key(key_type, *parts)
        try:
            deleted = await self.backend.delete(key)
            if not self.backend.supports_pattern_delete:
                await self._untrack(key_type, key)
            return deleted
        except Exception as e:
            logger.warning(f"Cache delete failed for {key}: {e}")
            return False

    async def clear(self, key_type: str, *parts: Any) -> int:
        """Delete every key of a type, optionally narrowed by leading parts.

        Returns the number of keys removed, 0 on backend failure.
        """
        base = self.build_key(key_type, *parts)
        try:
            if self.backend.supports_pattern_delete:
                removed = int(await self.backend.delete(base))
                removed += await self.backend.delete_pattern(f"{base}:*")
            else:
                removed = await self._clear_tracked(key_type, base)
            if removed:
                logger.debug(f"Cleared {removed} keys for {base}")
            return removed
        except Exception as e:
            logger.warning(f"Cache clear failed for {base}: {e}")
            return 0

    async def clear_all(self) -> int:
        """Clear every key type this manager owns."""
        removed = 0
        for key_type in self.KNOWN_CACHE_TYPES:
            removed += await self.clear(key_type)
        return removed

    # DataTable (paginated list) caches

    @staticmethod
    def filters_hash(filters: Optional[Dict[str, Any]]) -> str:
        """Stable hash of list request filters (order independent)."""
        encoded = json.dumps(filters or {}, sort_keys=True, default=str)
        return hashlib.md5(encoded.encode("utf-8")).hexdigest()

    async def get_datatable(self, context: str, filters: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """Get a cached list page for a list context and its filters."""
        return await self.get(CacheKeyTypes.DATATABLE, context, self.filters_hash(filters))

    async def set_datatable(
        self,
        context: str,
        filters: Optional[Dict[str, Any]],
        value: Any,
        ttl: Optional[int] = None,
    ) -> bool:
        """Cache a list page for a list context and its filters."""
        return await self.set(CacheKeyTypes.DATATABLE, value, context, self.filters_hash(filters), ttl=ttl)

    async def invalidate_datatable_cache(self, context: str) -> int:
        """Drop every cached page of one list context."""
        return await self.clear(CacheKeyTypes.DATATABLE, context)

    # Invalidation contract

    @abstractmethod
    async def invalidate(self, entity_id: int, tenant_id: Optional[int] = None) -> None:
        """Invalidate everything that could contain one entity row."""
        ...

    @abstractmethod
    async def invalidate_tenant_collection(self, tenant_id: int) -> None:
        """Invalidate the lists and counts scoped to one tenant."""
        ...

    async def invalidate_all(self) -> int:
        """Drop the whole cache group."""
        removed = await self.clear_all()
        logger.debug(f"Invalidated all {self.ENTITY_NAME or self.cache_group} caches ({removed} keys)")
        return removed

    # Key tracking for backends without wildcard delete

    async def _track(self, key_type: str, key: str, ttl: int) -> None:
        self._max_ttl_seen = max(self._max_ttl_seen, ttl)
        index_key = self._index_key(key_type)
        async with self._index_lock:
            tracked = await self._read_index(index_key)
            if key in tracked:
                await self.backend.expire(index_key, self._max_ttl_seen)
                return
            # Drop keys that expired or were deleted behind the index
            tracked = [entry for entry in tracked if await self.backend.get(entry) is not None]
            tracked.append(key)
            await self.backend.set(index_key, self._serialize(tracked), self._max_ttl_seen)

    async def _untrack(self, key_type: str, key: str) -> None:
        index_key = self._index_key(key_type)
        async with self._index_lock:
            tracked = await self._read_index(index_key)
            if key not in tracked:
                return
            tracked.remove(key)
            if tracked:
                await self.backend.set(index_key, self._serialize(tracked), self._max_ttl_seen)
            else:
                await self.backend.delete(index_key)

    async def _clear_tracked(self, key_type: str, base: str) -> int:
        index_key = self._index_key(key_type)
        async with self._index_lock:
            tracked = await self._read_index(index_key)
            matching = [key for key in tracked if key == base or key.startswith(f"{base}:")]
            removed = 0
            for key in matching:
                if await self.backend.delete(key):
                    removed += 1

            remaining = [key for key in tracked if key not in matching]
            if remaining:
                await self.backend.set(index_key, self._serialize(remaining), self._max_ttl_seen)
            elif tracked:
                await self.backend.delete(index_key)
            return removed

    async def _read_index(self, index_key: str) -> List[str]:
        raw = await self.backend.get(index_key)
        if raw is None:
            return []
        tracked = self._deserialize(raw)
        return list(tracked) if isinstance(tracked, list) else []

    async def _delete_many(self, keys: Iterable[Tuple[Any, ...]]) -> None:
        """Delete several (key_type, *parts) entries."""
        for key_type, *parts in keys:
            await self.delete(key_type, *parts)
