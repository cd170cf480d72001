"""Customer (tenant) cache manager."""

import logging
from typing import Any, Dict, List, Optional

from ..services.entity_cache_manager import EntityCacheManager
from ....config.constants import CacheGroups, CacheKeyTypes, CacheTTL

logger = logging.getLogger(__name__)


class CustomerCacheManager(EntityCacheManager):
    """Caches customer rows, the customer list and per-user ownership."""

    CACHE_GROUP = CacheGroups.CUSTOMER
    CACHE_EXPIRY = CacheTTL.CUSTOMER
    ENTITY_NAME = "customer"
    KNOWN_CACHE_TYPES = (
        "customer",
        "customer_list",
        "customer_by_user",
        "customer_count",
        "customer_employee_count",
        "customer_relation",
        "customer_ids",
        CacheKeyTypes.DATATABLE,
    )

    LIST_CONTEXT = "customer_list"

    async def get_customer(self, customer_id: int) -> Optional[Dict[str, Any]]:
        return await self.get("customer", customer_id)

    async def set_customer(self, customer_id: int, customer: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        return await self.set("customer", customer, customer_id, ttl=ttl)

    async def get_customer_list(self) -> Optional[List[Dict[str, Any]]]:
        return await self.get("customer_list")

    async def set_customer_list(self, customers: List[Dict[str, Any]], ttl: Optional[int] = None) -> bool:
        return await self.set("customer_list", customers, ttl=ttl)

    async def get_customers_by_user(self, user_id: int) -> Optional[List[int]]:
        """Get ids of customers owned by a user."""
        return await self.get("customer_by_user", user_id)

    async def set_customers_by_user(self, user_id: int, customer_ids: List[int], ttl: Optional[int] = None) -> bool:
        return await self.set("customer_by_user", customer_ids, user_id, ttl=ttl)

    async def invalidate(self, entity_id: int, tenant_id: Optional[int] = None) -> None:
        """Invalidate caches that could contain one customer.

        A customer is its own tenant, so ``tenant_id`` defaults to ``entity_id``.
        """
        await self.delete("customer", entity_id)
        await self.delete("customer_list")
        await self.clear("customer_relation")
        await self.clear("customer_by_user")
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)
        await self.invalidate_tenant_collection(tenant_id if tenant_id is not None else entity_id)
        await self.delete("customer_ids", "active")
        logger.debug(f"Invalidated customer cache for customer {entity_id}")

    async def invalidate_tenant_collection(self, tenant_id: int) -> None:
        """Invalidate per-customer counters."""
        await self._delete_many([
            ("customer_count", tenant_id),
            ("customer_employee_count", tenant_id),
        ])
