"""Membership catalogue cache managers.

Membership groups and features are a platform-wide catalogue, not scoped to
one customer, so ``invalidate_tenant_collection`` only drops list pages.
A group change also invalidates the features cache, since feature lookups
are grouped by membership group.
"""

import logging
from typing import Any, Dict, List, Optional

from ..entities.protocols import CacheBackend
from ..services.entity_cache_manager import EntityCacheManager
from ....config.constants import CacheGroups, CacheKeyTypes, CacheTTL

logger = logging.getLogger(__name__)


class MembershipFeaturesCacheManager(EntityCacheManager):
    """Caches membership features and their feature groups."""

    CACHE_GROUP = CacheGroups.MEMBERSHIP_FEATURES
    CACHE_EXPIRY = CacheTTL.MEMBERSHIP
    ENTITY_NAME = "membership_feature"
    KNOWN_CACHE_TYPES = (
        "membership_feature",
        "membership_feature_list",
        "membership_feature_group",
        "membership_feature_groups",
        "membership_features_by_group",
        "active_groups_and_features",
        "field_name_exists",
        CacheKeyTypes.DATATABLE,
    )

    LIST_CONTEXT = "membership_feature_list"

    async def get_feature(self, feature_id: int) -> Optional[Dict[str, Any]]:
        return await self.get("membership_feature", feature_id)

    async def set_feature(self, feature_id: int, feature: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        return await self.set("membership_feature", feature, feature_id, ttl=ttl)

    async def get_feature_group(self, group_id: int) -> Optional[Dict[str, Any]]:
        return await self.get("membership_feature_group", group_id)

    async def set_feature_group(self, group_id: int, group: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        return await self.set("membership_feature_group", group, group_id, ttl=ttl)

    async def get_features_by_group(self, group_id: int) -> Optional[List[Dict[str, Any]]]:
        return await self.get("membership_features_by_group", group_id)

    async def set_features_by_group(
        self,
        group_id: int,
        features: List[Dict[str, Any]],
        ttl: Optional[int] = None,
    ) -> bool:
        return await self.set("membership_features_by_group", features, group_id, ttl=ttl)

    async def get_active_groups_and_features(self) -> Optional[List[Dict[str, Any]]]:
        return await self.get("active_groups_and_features")

    async def set_active_groups_and_features(self, catalogue: List[Dict[str, Any]], ttl: Optional[int] = None) -> bool:
        return await self.set("active_groups_and_features", catalogue, ttl=ttl)

    async def invalidate(self, entity_id: int, tenant_id: Optional[int] = None) -> None:
        """Invalidate caches that could contain one feature."""
        await self.delete("membership_feature", entity_id)
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)
        await self.clear("membership_features_by_group")
        await self.clear("active_groups_and_features")
        await self.clear("membership_feature_list")
        await self.clear("field_name_exists")
        logger.debug(f"Invalidated membership feature cache for feature {entity_id}")

    async def invalidate_group(self, group_id: int) -> None:
        """Invalidate caches that could contain one feature group."""
        await self.delete("membership_feature_group", group_id)
        await self.clear("membership_feature_groups")
        await self.clear("active_groups_and_features")
        await self.clear("membership_features_by_group")
        logger.debug(f"Invalidated membership feature cache for group {group_id}")

    async def invalidate_tenant_collection(self, tenant_id: int) -> None:
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)


class MembershipGroupsCacheManager(EntityCacheManager):
    """Caches membership groups by id and by slug."""

    CACHE_GROUP = CacheGroups.MEMBERSHIP_GROUPS
    CACHE_EXPIRY = CacheTTL.MEMBERSHIP
    ENTITY_NAME = "membership_group"
    KNOWN_CACHE_TYPES = (
        "membership_group",
        "membership_group_list",
        "membership_groups_active",
        "membership_group_by_slug",
        CacheKeyTypes.DATATABLE,
    )

    LIST_CONTEXT = "membership_group_list"

    def __init__(
        self,
        backend: CacheBackend,
        key_prefix: str = "customer_access",
        default_ttl: Optional[int] = None,
        features_cache: Optional[MembershipFeaturesCacheManager] = None,
    ):
        super().__init__(backend, key_prefix, default_ttl)
        self.features_cache = features_cache

    async def get_group(self, group_id: int) -> Optional[Dict[str, Any]]:
        return await self.get("membership_group", group_id)

    async def set_group(self, group_id: int, group: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        return await self.set("membership_group", group, group_id, ttl=ttl)

    async def get_group_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return await self.get("membership_group_by_slug", slug)

    async def set_group_by_slug(self, slug: str, group: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        return await self.set("membership_group_by_slug", group, slug, ttl=ttl)

    async def get_active_groups(self) -> Optional[List[Dict[str, Any]]]:
        return await self.get("membership_groups_active")

    async def set_active_groups(self, groups: List[Dict[str, Any]], ttl: Optional[int] = None) -> bool:
        return await self.set("membership_groups_active", groups, ttl=ttl)

    async def invalidate(
        self,
        entity_id: int,
        tenant_id: Optional[int] = None,
        slug: Optional[str] = None,
    ) -> None:
        """Invalidate caches that could contain one group, features included."""
        await self.delete("membership_group", entity_id)
        if slug:
            await self.delete("membership_group_by_slug", slug)
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)
        await self.clear("membership_groups_active")
        await self.clear("membership_group_list")

        if self.features_cache is not None:
            await self.features_cache.invalidate_group(entity_id)
        logger.debug(f"Invalidated membership group cache for group {entity_id}")

    async def invalidate_tenant_collection(self, tenant_id: int) -> None:
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)
