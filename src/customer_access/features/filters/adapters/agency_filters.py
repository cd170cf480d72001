"""Access filters involving the agency plugin.

Every filter here needs the agency plugin and adds nothing when it is not
installed.
"""

import logging
from typing import Optional

from .base import BaseAccessFilter
from ..entities.request_context import RequestContext
from ...hierarchy.entities.protocols import AgencyDirectory
from ...hierarchy.services.access_policy import AccessPolicy
from ...relations.entities.access_decision import RestrictedTo
from ...relations.services.relation_resolver import RelationResolver
from ....config.constants import DENY_ALL_PREDICATE, EntityTypes, QuerySurfaces, Tables
from ....database.utils import validate_identifier

logger = logging.getLogger(__name__)


class AgencyAccessFilter(BaseAccessFilter):
    """Agencies list for customer members.

    A division-scoped member sees the agency of their own branch only; a
    tenant-wide member sees every agency bridged to their tenant's branches.
    """

    SURFACE = QuerySurfaces.AGENCIES
    DEFAULT_ALIAS = "a"
    PRIORITY = 10
    REQUIRES_AGENCY_PLUGIN = True

    def __init__(self, policy: AccessPolicy, resolver: RelationResolver, agency_directory: AgencyDirectory):
        super().__init__(policy, agency_directory)
        self.resolver = resolver

    async def build_predicate(self, request: RequestContext, alias: str) -> Optional[str]:
        scope = await self.policy.classify(request.user_id)
        if scope is None:
            return None

        column_ref = self.column(alias, "id")
        if scope.is_division_scoped:
            agency_id = scope.employee.agency_id if scope.employee is not None else None
            own_agency = [agency_id] if agency_id is not None else []
            return self.decision_predicate(RestrictedTo.of(own_agency), column_ref)

        decision = await self.resolver.resolve(EntityTypes.AGENCY, request.user_id)
        return self.decision_predicate(decision, column_ref)


class AgencyEmployeeFilter(BaseAccessFilter):
    """Agency employees list for customer members."""

    SURFACE = QuerySurfaces.AGENCY_EMPLOYEES
    DEFAULT_ALIAS = "e"
    PRIORITY = 10
    REQUIRES_AGENCY_PLUGIN = True

    def __init__(self, policy: AccessPolicy, resolver: RelationResolver, agency_directory: AgencyDirectory):
        super().__init__(policy, agency_directory)
        self.resolver = resolver

    async def build_predicate(self, request: RequestContext, alias: str) -> Optional[str]:
        scope = await self.policy.classify(request.user_id)
        if scope is None:
            return None

        if scope.is_division_scoped:
            division_id = scope.employee.division_id if scope.employee is not None else None
            if division_id is None:
                return DENY_ALL_PREDICATE
            agency_id = await self.agency_directory.get_division_agency_id(division_id)
            return (
                f"({self.equals(self.column(alias, 'division_id'), division_id)}"
                f" AND {self.equals(self.column(alias, 'agency_id'), agency_id)})"
            )

        decision = await self.resolver.resolve(EntityTypes.AGENCY, request.user_id)
        return self.decision_predicate(decision, self.column(alias, "agency_id"))


class AgencyCustomerFilter(BaseAccessFilter):
    """Customers list for agency-role users: customers with a branch in their agency."""

    SURFACE = QuerySurfaces.CUSTOMERS
    DEFAULT_ALIAS = "c"
    PRIORITY = 20
    REQUIRES_AGENCY_PLUGIN = True

    def __init__(self, policy: AccessPolicy, agency_directory: AgencyDirectory, table_prefix: str = "wp_"):
        super().__init__(policy, agency_directory)
        if table_prefix:
            validate_identifier(table_prefix, "table prefix")
        self.branches_table = f"{table_prefix}{Tables.BRANCHES}"

    async def build_predicate(self, request: RequestContext, alias: str) -> Optional[str]:
        if not await self.policy.has_agency_role(request.user_id):
            return None

        agency_id = await self.agency_directory.get_user_agency_id(request.user_id)
        if agency_id is None:
            logger.debug(f"Agency user {request.user_id} has no agency, denying customers list")
            return DENY_ALL_PREDICATE

        return (
            f"{self.column(alias, 'id')} IN ("
            f"SELECT DISTINCT br.customer_id FROM {self.branches_table} br "
            f"WHERE br.agency_id = {int(agency_id)})"
        )


class AgencyCompanyFilter(BaseAccessFilter):
    """Companies list for agency-role users: companies in their agency's province."""

    SURFACE = QuerySurfaces.COMPANIES
    DEFAULT_ALIAS = "cc"
    PRIORITY = 20
    REQUIRES_AGENCY_PLUGIN = True

    async def build_predicate(self, request: RequestContext, alias: str) -> Optional[str]:
        if not await self.policy.has_agency_role(request.user_id):
            return None

        agency_id = await self.agency_directory.get_user_agency_id(request.user_id)
        if agency_id is None:
            return DENY_ALL_PREDICATE

        province_id = await self.agency_directory.get_agency_province_id(agency_id)
        return self.equals(self.column(alias, "province_id"), province_id)
