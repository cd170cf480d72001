"""Relation statistics for one related entity.

Counts of customers (and of bridge rows, i.e. branches) related to one
entity id, restricted to the customers the requesting user belongs to.
Used by entity detail screens such as an agency's customer tab.
"""

import logging
from typing import List, Optional

from ..entities.protocols import BridgeRepository, BypassPolicy, TenantMembership
from ..entities.relation_config import RelationConfig
from .relation_cache import RelationCacheProvider
from .relation_registry import RelationConfigRegistry
from ....config.constants import CacheKeyTypes
from ....core.value_objects import UserId

logger = logging.getLogger(__name__)


class RelationStatisticsService:
    """Cached relation counts for entity detail views."""

    def __init__(
        self,
        registry: RelationConfigRegistry,
        bridge_repository: BridgeRepository,
        membership: TenantMembership,
        cache_provider: RelationCacheProvider,
        bypass_policy: BypassPolicy,
    ):
        self.registry = registry
        self.bridge_repository = bridge_repository
        self.membership = membership
        self.cache_provider = cache_provider
        self.bypass_policy = bypass_policy

    async def get_tenant_count_for_entity(self, entity_type: str, entity_id: int, user_id: UserId) -> int:
        """Number of customers related to an entity that the user can see.

        Raises:
            UnknownEntityTypeError: entity_type is not registered
        """
        return await self._count(CacheKeyTypes.RELATION_COUNT, entity_type, entity_id, user_id)

    async def get_bridge_row_count_for_entity(self, entity_type: str, entity_id: int, user_id: UserId) -> int:
        """Number of bridge rows (branches) related to an entity that the user can see.

        Raises:
            UnknownEntityTypeError: entity_type is not registered
        """
        return await self._count(CacheKeyTypes.RELATION_BRANCH_COUNT, entity_type, entity_id, user_id)

    async def _count(self, count_type: str, entity_type: str, entity_id: int, user_id: UserId) -> int:
        config = self.registry.require(entity_type)
        cache = self.cache_provider.for_config(config)

        cached = await cache.get_count(count_type, entity_type, entity_id, user_id)
        if cached is not None:
            return int(cached)

        try:
            tenant_ids = await self._tenant_scope(config, user_id)
            if tenant_ids is not None and not tenant_ids:
                return 0

            if count_type == CacheKeyTypes.RELATION_COUNT:
                count = await self.bridge_repository.count_tenants_for_entity(config, entity_id, tenant_ids)
            else:
                count = await self.bridge_repository.count_bridge_rows_for_entity(config, entity_id, tenant_ids)
        except Exception as e:
            logger.error(f"Failed to count {count_type} for {entity_type} {entity_id}: {e}")
            return 0

        await cache.set_count(count_type, entity_type, entity_id, user_id, count, ttl=config.cache_ttl)
        return count

    async def _tenant_scope(self, config: RelationConfig, user_id: UserId) -> Optional[List[int]]:
        """Tenants to count within, None for no restriction."""
        if not config.filter_enabled:
            return None
        if await self.bypass_policy.is_unrestricted(user_id):
            return None
        return await self.membership.get_tenant_ids(user_id)
