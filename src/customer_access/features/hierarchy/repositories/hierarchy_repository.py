"""AsyncPG hierarchy probe.

Reads customers, branches and employees directly. Employee contexts are
cached in the employee cache group (``user_info``) when a cache manager is
supplied; employee and branch invalidation clears them.
"""

import logging
from typing import List, Optional

from ..entities.hierarchy import BranchBridge, EmployeeContext
from ...cache.managers.employee_cache import EmployeeCacheManager
from ....config.constants import Tables
from ....core.exceptions import QueryError
from ....core.value_objects import UserId
from ....database.protocols import Database
from ....database.utils import coerce_ids, validate_identifier

logger = logging.getLogger(__name__)


class AsyncPGHierarchyProbe:
    """AsyncPG implementation of HierarchyProbe protocol."""

    def __init__(
        self,
        database: Database,
        table_prefix: str = "wp_",
        employee_cache: Optional[EmployeeCacheManager] = None,
    ):
        self.database = database
        self.employee_cache = employee_cache
        if table_prefix:
            validate_identifier(table_prefix, "table prefix")
        self.customers_table = f"{table_prefix}{Tables.CUSTOMERS}"
        self.branches_table = f"{table_prefix}{Tables.BRANCHES}"
        self.employees_table = f"{table_prefix}{Tables.EMPLOYEES}"

    async def get_employee_context(self, user_id: UserId) -> Optional[EmployeeContext]:
        """Get the user's employee row joined with its branch."""
        if self.employee_cache is not None:
            cached = await self.employee_cache.get_user_info(int(user_id))
            if cached is not None:
                return EmployeeContext(**cached)

        query = f"""
            SELECT e.id AS employee_id, e.user_id, e.customer_id, e.branch_id,
                   b.agency_id, b.division_id, b.inspector_id
            FROM {self.employees_table} e
            LEFT JOIN {self.branches_table} b ON b.id = e.branch_id
            WHERE e.user_id = $1
            ORDER BY e.id
            LIMIT 1
        """
        try:
            row = await self.database.fetchrow(query, int(user_id))
        except Exception as e:
            logger.error(f"Failed to load employee context of user {user_id}: {e}")
            raise QueryError(f"Failed to load employee context: {e}", details={"user_id": int(user_id)})

        if row is None:
            return None

        context = EmployeeContext.from_row(row)
        if self.employee_cache is not None:
            await self.employee_cache.set_user_info(int(user_id), context.to_dict())
        return context

    async def get_owned_customer_ids(self, user_id: UserId) -> List[int]:
        """Get ids of customers owned by the user."""
        query = f"SELECT id FROM {self.customers_table} WHERE user_id = $1"
        try:
            rows = await self.database.fetch(query, int(user_id))
        except Exception as e:
            logger.error(f"Failed to load customers owned by user {user_id}: {e}")
            raise QueryError(f"Failed to load owned customers: {e}", details={"user_id": int(user_id)})
        return coerce_ids(row["id"] for row in rows)

    async def get_tenant_ids(self, user_id: UserId) -> List[int]:
        """Get ids of customers the user owns or is employed by."""
        query = f"""
            SELECT e.customer_id AS tenant_id
            FROM {self.employees_table} e
            WHERE e.user_id = $1 AND e.customer_id IS NOT NULL
            UNION
            SELECT c.id AS tenant_id
            FROM {self.customers_table} c
            WHERE c.user_id = $1
        """
        try:
            rows = await self.database.fetch(query, int(user_id))
        except Exception as e:
            logger.error(f"Failed to load tenants of user {user_id}: {e}")
            raise QueryError(f"Failed to load tenants: {e}", details={"user_id": int(user_id)})
        return coerce_ids(row["tenant_id"] for row in rows)

    async def get_branch(self, branch_id: int) -> Optional[BranchBridge]:
        """Get a branch's bridge values."""
        query = f"""
            SELECT id, customer_id, agency_id, division_id, inspector_id
            FROM {self.branches_table}
            WHERE id = $1
        """
        try:
            row = await self.database.fetchrow(query, int(branch_id))
        except Exception as e:
            logger.error(f"Failed to load branch {branch_id}: {e}")
            raise QueryError(f"Failed to load branch: {e}", details={"branch_id": branch_id})

        if row is None:
            return None
        return BranchBridge(
            branch_id=int(row["id"]),
            customer_id=int(row["customer_id"]),
            agency_id=row["agency_id"],
            division_id=row["division_id"],
            inspector_id=row["inspector_id"],
        )
