"""Hierarchy protocols.

Direct probes of the customer hierarchy, the user role store and the
optional agency plugin. All of them are external collaborators supplied at
composition time.
"""

from abc import abstractmethod
from typing import FrozenSet, List, Optional, Protocol, runtime_checkable

from .hierarchy import BranchBridge, EmployeeContext
from ....core.value_objects import UserId


@runtime_checkable
class HierarchyProbe(Protocol):
    """Read-only queries over customers, branches and employees."""

    @abstractmethod
    async def get_employee_context(self, user_id: UserId) -> Optional[EmployeeContext]:
        """The user's employee row with its branch bridge values."""
        ...

    @abstractmethod
    async def get_owned_customer_ids(self, user_id: UserId) -> List[int]:
        """Customers whose owner is the user."""
        ...

    @abstractmethod
    async def get_tenant_ids(self, user_id: UserId) -> List[int]:
        """Customers the user owns or is employed by."""
        ...

    @abstractmethod
    async def get_branch(self, branch_id: int) -> Optional[BranchBridge]:
        """A branch's bridge values."""
        ...


@runtime_checkable
class UserDirectory(Protocol):
    """Role and capability lookup (role storage is owned by the host platform)."""

    @abstractmethod
    async def get_roles(self, user_id: UserId) -> FrozenSet[str]:
        ...

    @abstractmethod
    async def get_capabilities(self, user_id: UserId) -> FrozenSet[str]:
        ...


@runtime_checkable
class AgencyDirectory(Protocol):
    """Optional capability backed by the agency plugin.

    ``is_available`` is False when the plugin is not installed; callers then
    contribute no agency restriction at all.
    """

    @property
    @abstractmethod
    def is_available(self) -> bool:
        ...

    @abstractmethod
    async def get_user_agency_id(self, user_id: UserId) -> Optional[int]:
        """Agency the user owns or works for."""
        ...

    @abstractmethod
    async def get_agency_province_id(self, agency_id: int) -> Optional[int]:
        ...

    @abstractmethod
    async def get_division_agency_id(self, division_id: int) -> Optional[int]:
        ...
