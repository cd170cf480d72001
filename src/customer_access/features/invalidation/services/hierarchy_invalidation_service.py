"""Invalidation triggers called by CRUD collaborators after a mutation.

Triggers are fire-and-forget: every step runs even if an earlier one failed,
failures are logged, and nothing is raised back into the mutation that
triggered them. A failed delete leaves the entry until its TTL.
"""

import logging
from typing import Awaitable, Optional

from ...cache.managers.branch_cache import BranchCacheManager
from ...cache.managers.customer_cache import CustomerCacheManager
from ...cache.managers.employee_cache import EmployeeCacheManager
from ...cache.managers.invoice_cache import InvoiceCacheManager
from ...cache.managers.membership_cache import MembershipFeaturesCacheManager, MembershipGroupsCacheManager
from ...cache.managers.payment_cache import PaymentCacheManager
from ...relations.services.relation_cache import RelationCacheProvider
from ...relations.services.relation_registry import RelationConfigRegistry

logger = logging.getLogger(__name__)


class HierarchyInvalidationService:
    """Clears entity, collection and relation caches after hierarchy changes."""

    def __init__(
        self,
        registry: RelationConfigRegistry,
        relation_caches: RelationCacheProvider,
        branch_cache: BranchCacheManager,
        employee_cache: EmployeeCacheManager,
        customer_cache: CustomerCacheManager,
        invoice_cache: Optional[InvoiceCacheManager] = None,
        payment_cache: Optional[PaymentCacheManager] = None,
        membership_features_cache: Optional[MembershipFeaturesCacheManager] = None,
        membership_groups_cache: Optional[MembershipGroupsCacheManager] = None,
    ):
        self.registry = registry
        self.relation_caches = relation_caches
        self.branch_cache = branch_cache
        self.employee_cache = employee_cache
        self.customer_cache = customer_cache
        self.invoice_cache = invoice_cache
        self.payment_cache = payment_cache
        self.membership_features_cache = membership_features_cache
        self.membership_groups_cache = membership_groups_cache

    async def branch_changed(self, branch_id: int, customer_id: Optional[int] = None) -> None:
        """A branch was created, updated or deleted."""
        logger.debug(f"Invalidating caches for branch {branch_id} (customer {customer_id})")
        await self._run("branch", self.branch_cache.invalidate(branch_id, customer_id))
        # Employee contexts carry the branch's agency and division
        await self._run("employee contexts", self.employee_cache.clear("user_info"))
        await self._run("employee by branch", self.employee_cache.invalidate_branch_employees(branch_id))
        if customer_id is not None:
            await self._run("customer collections", self.customer_cache.invalidate_tenant_collection(customer_id))
        await self.invalidate_relations()

    async def employee_changed(
        self,
        employee_id: int,
        customer_id: Optional[int] = None,
        branch_id: Optional[int] = None,
    ) -> None:
        """An employee was created, updated or deleted."""
        logger.debug(f"Invalidating caches for employee {employee_id} (customer {customer_id}, branch {branch_id})")
        await self._run("employee", self.employee_cache.invalidate(employee_id, customer_id, branch_id))
        if customer_id is not None:
            await self._run("customer collections", self.customer_cache.invalidate_tenant_collection(customer_id))
        await self.invalidate_relations()

    async def customer_changed(self, customer_id: int) -> None:
        """A customer was created, updated or deleted (including ownership changes)."""
        logger.debug(f"Invalidating caches for customer {customer_id}")
        await self._run("customer", self.customer_cache.invalidate(customer_id))
        await self._run("branch collections", self.branch_cache.invalidate_tenant_collection(customer_id))
        await self._run("employee collections", self.employee_cache.invalidate_tenant_collection(customer_id))
        await self.invalidate_relations()

    async def invoice_changed(self, invoice_id: int, customer_id: Optional[int] = None) -> None:
        if self.invoice_cache is None:
            return
        await self._run("invoice", self.invoice_cache.invalidate(invoice_id, customer_id))

    async def payment_changed(
        self,
        payment_id: int,
        customer_id: Optional[int] = None,
        invoice_id: Optional[int] = None,
    ) -> None:
        if self.payment_cache is None:
            return
        await self._run("payment", self.payment_cache.invalidate(payment_id, customer_id, invoice_id))
        if invoice_id is not None and self.invoice_cache is not None:
            # Payment status feeds invoice totals
            await self._run("invoice", self.invoice_cache.invalidate(invoice_id, customer_id))

    async def membership_feature_changed(self, feature_id: int) -> None:
        if self.membership_features_cache is None:
            return
        await self._run("membership feature", self.membership_features_cache.invalidate(feature_id))

    async def membership_group_changed(self, group_id: int, slug: Optional[str] = None) -> None:
        """A membership group changed; its features are invalidated with it."""
        if self.membership_groups_cache is not None:
            await self._run("membership group", self.membership_groups_cache.invalidate(group_id, slug=slug))
        elif self.membership_features_cache is not None:
            await self._run("membership features", self.membership_features_cache.invalidate_group(group_id))

    async def invalidate_relations(self) -> None:
        """Drop cached decisions and relation counts of every registered entity type."""
        for manager in self.relation_caches.managers_for(self.registry.configs()):
            await self._run(f"relations {manager.cache_group}", manager.clear_all())

    async def _run(self, step: str, operation: Awaitable) -> None:
        try:
            await operation
        except Exception as e:
            logger.warning(f"Cache invalidation step '{step}' failed, entries expire by TTL: {e}")
