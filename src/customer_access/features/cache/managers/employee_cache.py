"""Employee cache manager."""

import logging
from typing import Any, Dict, List, Optional

from ..services.entity_cache_manager import EntityCacheManager
from ....config.constants import CacheGroups, CacheKeyTypes, CacheTTL

logger = logging.getLogger(__name__)


class EmployeeCacheManager(EntityCacheManager):
    """Caches customer employees, per-customer and per-branch employee lists."""

    CACHE_GROUP = CacheGroups.EMPLOYEE
    CACHE_EXPIRY = CacheTTL.EMPLOYEE
    ENTITY_NAME = "employee"
    KNOWN_CACHE_TYPES = (
        "customer_employee",
        "customer_employee_list",
        "employee_stats",
        "employee_by_customer",
        "employee_by_branch",
        "employee_count",
        "employee_relation",
        "employee_ids",
        "user_info",
        "email_exists",
        "nik_exists",
        CacheKeyTypes.DATATABLE,
    )

    LIST_CONTEXT = "customer_employee_list"

    async def get_employee(self, employee_id: int) -> Optional[Dict[str, Any]]:
        return await self.get("customer_employee", employee_id)

    async def set_employee(self, employee_id: int, employee: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        return await self.set("customer_employee", employee, employee_id, ttl=ttl)

    async def get_employees_by_customer(self, customer_id: int) -> Optional[List[Dict[str, Any]]]:
        return await self.get("employee_by_customer", customer_id)

    async def set_employees_by_customer(
        self,
        customer_id: int,
        employees: List[Dict[str, Any]],
        ttl: Optional[int] = None,
    ) -> bool:
        return await self.set("employee_by_customer", employees, customer_id, ttl=ttl)

    async def get_employees_by_branch(self, branch_id: int) -> Optional[List[Dict[str, Any]]]:
        return await self.get("employee_by_branch", branch_id)

    async def set_employees_by_branch(
        self,
        branch_id: int,
        employees: List[Dict[str, Any]],
        ttl: Optional[int] = None,
    ) -> bool:
        return await self.set("employee_by_branch", employees, branch_id, ttl=ttl)

    async def get_user_info(self, user_id: int) -> Optional[Dict[str, Any]]:
        """Get the cached employee context of a user."""
        return await self.get("user_info", user_id)

    async def set_user_info(self, user_id: int, user_info: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        return await self.set("user_info", user_info, user_id, ttl=ttl)

    async def invalidate(
        self,
        entity_id: int,
        tenant_id: Optional[int] = None,
        branch_id: Optional[int] = None,
    ) -> None:
        """Invalidate caches that could contain one employee."""
        await self.delete("customer_employee", entity_id)
        await self.clear("employee_relation")
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)

        if tenant_id is not None:
            await self._delete_many([
                ("employee_by_customer", tenant_id),
                ("employee_count", tenant_id),
            ])

        if branch_id is not None:
            await self.delete("employee_by_branch", branch_id)

        await self.delete("employee_ids", "active")
        # The employee context of every user may have moved with this row
        await self.clear("user_info")
        logger.debug(f"Invalidated employee cache for employee {entity_id} (customer {tenant_id}, branch {branch_id})")

    async def invalidate_tenant_collection(self, tenant_id: int) -> None:
        """Invalidate one customer's employee lists and counts."""
        await self._delete_many([
            ("employee_by_customer", tenant_id),
            ("employee_count", tenant_id),
        ])
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)

    async def invalidate_branch_employees(self, branch_id: int) -> None:
        """Invalidate one branch's employee list."""
        await self.delete("employee_by_branch", branch_id)
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)
