"""Branch cache manager."""

import logging
from typing import Any, Dict, List, Optional

from ..services.entity_cache_manager import EntityCacheManager
from ....config.constants import CacheGroups, CacheKeyTypes, CacheTTL

logger = logging.getLogger(__name__)


class BranchCacheManager(EntityCacheManager):
    """Caches branch rows, per-customer branch lists and branch relations."""

    CACHE_GROUP = CacheGroups.BRANCH
    CACHE_EXPIRY = CacheTTL.BRANCH
    ENTITY_NAME = "branch"
    KNOWN_CACHE_TYPES = (
        "branch",
        "branch_list",
        "branch_by_customer",
        "branch_pusat",
        "branch_count",
        "branch_relation",
        "branch_ids",
        "code_exists",
        "name_exists",
        "inspector_assignment",
        CacheKeyTypes.DATATABLE,
    )

    LIST_CONTEXT = "branch_list"

    async def get_branch(self, branch_id: int) -> Optional[Dict[str, Any]]:
        return await self.get("branch", branch_id)

    async def set_branch(self, branch_id: int, branch: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        return await self.set("branch", branch, branch_id, ttl=ttl)

    async def get_branches_by_customer(self, customer_id: int) -> Optional[List[Dict[str, Any]]]:
        return await self.get("branch_by_customer", customer_id)

    async def set_branches_by_customer(
        self,
        customer_id: int,
        branches: List[Dict[str, Any]],
        ttl: Optional[int] = None,
    ) -> bool:
        return await self.set("branch_by_customer", branches, customer_id, ttl=ttl)

    async def get_pusat_branch(self, customer_id: int) -> Optional[Dict[str, Any]]:
        """Get the customer's head-office branch."""
        return await self.get("branch_pusat", customer_id)

    async def set_pusat_branch(self, customer_id: int, branch: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        return await self.set("branch_pusat", branch, customer_id, ttl=ttl)

    async def get_branch_count(self, customer_id: int) -> Optional[int]:
        return await self.get("branch_count", customer_id)

    async def set_branch_count(self, customer_id: int, count: int, ttl: Optional[int] = None) -> bool:
        return await self.set("branch_count", count, customer_id, ttl=ttl)

    async def invalidate(self, entity_id: int, tenant_id: Optional[int] = None) -> None:
        """Invalidate caches that could contain one branch."""
        await self.delete("branch", entity_id)
        await self.clear("branch_relation")
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)

        if tenant_id is not None:
            await self._delete_tenant_keys(tenant_id)

        await self.delete("branch_ids", "active")
        logger.debug(f"Invalidated branch cache for branch {entity_id} (customer {tenant_id})")

    async def invalidate_tenant_collection(self, tenant_id: int) -> None:
        """Invalidate one customer's branch lists and counts."""
        await self._delete_tenant_keys(tenant_id)
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)
        logger.debug(f"Invalidated branch collections for customer {tenant_id}")

    async def _delete_tenant_keys(self, tenant_id: int) -> None:
        await self._delete_many([
            ("branch_by_customer", tenant_id),
            ("branch_pusat", tenant_id),
            ("branch_count", tenant_id),
        ])
