"""Access filters for the customer plugin's own list surfaces."""

import logging
from typing import ClassVar, Optional

from .base import BaseAccessFilter
from ..entities.request_context import RequestContext
from ...hierarchy.entities.hierarchy import CallerScope
from ...hierarchy.services.access_policy import AccessPolicy
from ...relations.services.relation_resolver import RelationResolver
from ....config.constants import DENY_ALL_PREDICATE, EntityTypes, QuerySurfaces

logger = logging.getLogger(__name__)


class CustomerAccessFilter(BaseAccessFilter):
    """Customers list: customer-role users see the customers they belong to."""

    SURFACE = QuerySurfaces.CUSTOMERS
    DEFAULT_ALIAS = "c"
    PRIORITY = 10

    def __init__(self, policy: AccessPolicy, resolver: RelationResolver):
        super().__init__(policy)
        self.resolver = resolver

    async def build_predicate(self, request: RequestContext, alias: str) -> Optional[str]:
        if not await self.policy.has_customer_role(request.user_id):
            return None
        decision = await self.resolver.resolve(EntityTypes.CUSTOMER, request.user_id)
        return self.decision_predicate(decision, self.column(alias, "id"))


class _BranchScopedFilter(BaseAccessFilter):
    """Branch rows seen by a customer member.

    Division-scoped members see their tenant's branches in their own
    division; tenant-wide members get the resolver's decision.
    """

    ENTITY_TYPE: ClassVar[str] = EntityTypes.BRANCH

    def __init__(self, policy: AccessPolicy, resolver: RelationResolver):
        super().__init__(policy)
        self.resolver = resolver

    async def build_predicate(self, request: RequestContext, alias: str) -> Optional[str]:
        scope = await self.policy.classify(request.user_id)
        if scope is None:
            return None

        if scope.is_division_scoped:
            return self._division_predicate(scope, alias)

        decision = await self.resolver.resolve(self.ENTITY_TYPE, request.user_id)
        return self.decision_predicate(decision, self.column(alias, "id"))

    def _division_predicate(self, scope: CallerScope, alias: str) -> str:
        if scope.employee is None or scope.employee.division_id is None:
            return DENY_ALL_PREDICATE
        return (
            f"({self.column(alias, 'customer_id')} = {int(scope.customer_id)}"
            f" AND {self.column(alias, 'division_id')} = {int(scope.employee.division_id)})"
        )


class BranchAccessFilter(_BranchScopedFilter):
    """Customer branches list."""

    SURFACE = QuerySurfaces.BRANCHES
    DEFAULT_ALIAS = "b"
    ENTITY_TYPE = EntityTypes.BRANCH


class CompanyAccessFilter(_BranchScopedFilter):
    """Companies list (branches seen as companies) for customer members."""

    SURFACE = QuerySurfaces.COMPANIES
    DEFAULT_ALIAS = "cc"
    ENTITY_TYPE = EntityTypes.COMPANY
