"""Access policy: who bypasses, who belongs to which plugin, and how widely a
customer member sees inside their tenant.

Classification rules for customer members:

- customer owners and ``customer_admin`` users are tenant-wide;
- an employee whose branch is bridged to an agency division is
  division-scoped;
- every other employee is tenant-wide.
"""

import logging
from typing import Iterable, Optional

from ..entities.hierarchy import CallerScope, ScopeNuance
from ..entities.protocols import HierarchyProbe, UserDirectory
from ....config.constants import CustomerRole, DEFAULT_AGENCY_ROLES, DEFAULT_BYPASS_CAPABILITIES
from ....core.value_objects import UserId

logger = logging.getLogger(__name__)


class AccessPolicy:
    """Role and scope checks shared by the resolver and the access filters."""

    def __init__(
        self,
        users: UserDirectory,
        probe: HierarchyProbe,
        bypass_capabilities: Iterable[str] = DEFAULT_BYPASS_CAPABILITIES,
        customer_roles: Optional[Iterable[str]] = None,
        agency_roles: Iterable[str] = DEFAULT_AGENCY_ROLES,
    ):
        self.users = users
        self.probe = probe
        self.bypass_capabilities = frozenset(bypass_capabilities)
        self.customer_roles = frozenset(
            customer_roles if customer_roles is not None else (role.value for role in CustomerRole)
        )
        self.agency_roles = frozenset(agency_roles)

    async def is_unrestricted(self, user_id: UserId) -> bool:
        """Platform administrators bypass every restriction."""
        capabilities = await self.users.get_capabilities(user_id)
        return not self.bypass_capabilities.isdisjoint(capabilities)

    async def has_customer_role(self, user_id: UserId) -> bool:
        roles = await self.users.get_roles(user_id)
        return not self.customer_roles.isdisjoint(roles)

    async def has_agency_role(self, user_id: UserId) -> bool:
        roles = await self.users.get_roles(user_id)
        return not self.agency_roles.isdisjoint(roles)

    async def classify(self, user_id: UserId) -> Optional[CallerScope]:
        """Scope of a customer member, None when the user is not one."""
        owned = await self.probe.get_owned_customer_ids(user_id)
        employee = await self.probe.get_employee_context(user_id)

        if owned:
            customer_id = employee.customer_id if employee is not None else owned[0]
            return CallerScope(
                nuance=ScopeNuance.TENANT,
                customer_id=customer_id,
                employee=employee,
                owned_customer_ids=frozenset(owned),
            )

        if employee is None:
            return None

        roles = await self.users.get_roles(user_id)
        if CustomerRole.CUSTOMER_ADMIN.value in roles:
            nuance = ScopeNuance.TENANT
        elif employee.has_division:
            nuance = ScopeNuance.DIVISION
        else:
            nuance = ScopeNuance.TENANT

        logger.debug(f"User {user_id} classified as {nuance.value} in customer {employee.customer_id}")
        return CallerScope(nuance=nuance, customer_id=employee.customer_id, employee=employee)
