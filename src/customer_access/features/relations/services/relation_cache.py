"""Relation decision caches.

One cache manager per relation cache group. Decisions are keyed by
``(entity_type, user_id)``, statistics by ``(entity_type, entity_id,
user_id)``.
"""

import logging
from typing import Dict, List, Optional

from ..entities.access_decision import AccessDecision, decision_from_payload, decision_to_payload
from ..entities.relation_config import RelationConfig
from ...cache.entities.protocols import CacheBackend
from ...cache.services.entity_cache_manager import EntityCacheManager
from ....config.constants import CacheGroups, CacheKeyTypes, CacheTTL
from ....core.value_objects import UserId

logger = logging.getLogger(__name__)


class RelationCacheManager(EntityCacheManager):
    """Caches access decisions and relation counts for one cache group."""

    CACHE_GROUP = CacheGroups.ENTITY_RELATIONS
    CACHE_EXPIRY = CacheTTL.RELATION
    ENTITY_NAME = "entity_relation"
    KNOWN_CACHE_TYPES = (
        CacheKeyTypes.ACCESSIBLE_IDS,
        CacheKeyTypes.RELATION_COUNT,
        CacheKeyTypes.RELATION_BRANCH_COUNT,
    )

    async def get_decision(self, entity_type: str, user_id: UserId) -> Optional[AccessDecision]:
        payload = await self.get(CacheKeyTypes.ACCESSIBLE_IDS, entity_type, int(user_id))
        if payload is None:
            return None

        decision = decision_from_payload(payload)
        if decision is None:
            logger.warning(f"Discarding malformed cached decision for {entity_type}/{user_id}")
            await self.delete(CacheKeyTypes.ACCESSIBLE_IDS, entity_type, int(user_id))
        return decision

    async def set_decision(
        self,
        entity_type: str,
        user_id: UserId,
        decision: AccessDecision,
        ttl: Optional[int] = None,
    ) -> bool:
        return await self.set(
            CacheKeyTypes.ACCESSIBLE_IDS,
            decision_to_payload(decision),
            entity_type,
            int(user_id),
            ttl=ttl,
        )

    async def get_count(self, count_type: str, entity_type: str, entity_id: int, user_id: UserId) -> Optional[int]:
        return await self.get(count_type, entity_type, int(entity_id), int(user_id))

    async def set_count(
        self,
        count_type: str,
        entity_type: str,
        entity_id: int,
        user_id: UserId,
        count: int,
        ttl: Optional[int] = None,
    ) -> bool:
        return await self.set(count_type, int(count), entity_type, int(entity_id), int(user_id), ttl=ttl)

    async def invalidate(self, entity_id: int, tenant_id: Optional[int] = None) -> None:
        """Any hierarchy change can move ids between users, drop the whole group."""
        removed = await self.clear_all()
        logger.debug(f"Cleared {removed} relation cache keys in {self.cache_group} after change to {entity_id}")

    async def invalidate_tenant_collection(self, tenant_id: int) -> None:
        await self.clear_all()

    async def invalidate_entity_type(self, entity_type: str) -> int:
        """Drop cached decisions and counts of one entity type."""
        removed = 0
        for key_type in self.KNOWN_CACHE_TYPES:
            removed += await self.clear(key_type, entity_type)
        return removed


class RelationCacheProvider:
    """Hands out one RelationCacheManager per cache group."""

    def __init__(
        self,
        backend: CacheBackend,
        key_prefix: str = "customer_access",
        default_ttl: Optional[int] = None,
    ):
        self.backend = backend
        self.key_prefix = key_prefix
        self.default_ttl = default_ttl
        self._managers: Dict[str, RelationCacheManager] = {}

    def for_group(self, cache_group: str) -> RelationCacheManager:
        manager = self._managers.get(cache_group)
        if manager is None:
            manager = RelationCacheManager(
                self.backend,
                key_prefix=self.key_prefix,
                default_ttl=self.default_ttl,
                cache_group=cache_group,
            )
            self._managers[cache_group] = manager
        return manager

    def for_config(self, config: RelationConfig) -> RelationCacheManager:
        return self.for_group(config.cache_group)

    def managers_for(self, configs: List[RelationConfig]) -> List[RelationCacheManager]:
        """Distinct managers covering the cache groups of the given configs."""
        groups = dict.fromkeys(config.cache_group for config in configs)
        return [self.for_group(group) for group in groups]
