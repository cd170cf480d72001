"""Relation resolution protocols.

Collaborators the resolver is constructed with. The hierarchy feature ships
implementations; tests pass fakes.
"""

from abc import abstractmethod
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from .relation_config import RelationConfig
from ....core.value_objects import UserId


@runtime_checkable
class BridgeRepository(Protocol):
    """Queries over the bridge table of a relation config."""

    @abstractmethod
    async def fetch_entity_ids(self, config: RelationConfig, tenant_ids: Sequence[int]) -> List[int]:
        """Distinct non-null entity ids bridged to any of the tenants."""
        ...

    @abstractmethod
    async def count_tenants_for_entity(
        self,
        config: RelationConfig,
        entity_id: int,
        tenant_ids: Optional[Sequence[int]] = None,
    ) -> int:
        """Number of distinct tenants bridged to one entity id."""
        ...

    @abstractmethod
    async def count_bridge_rows_for_entity(
        self,
        config: RelationConfig,
        entity_id: int,
        tenant_ids: Optional[Sequence[int]] = None,
    ) -> int:
        """Number of bridge rows pointing at one entity id."""
        ...


@runtime_checkable
class TenantMembership(Protocol):
    """Which tenants a user belongs to, read directly from the hierarchy."""

    @abstractmethod
    async def get_tenant_ids(self, user_id: UserId) -> List[int]:
        """Tenant ids the user owns or is employed by; empty when unrelated."""
        ...


@runtime_checkable
class BypassPolicy(Protocol):
    """Platform-administrator check evaluated before anything else."""

    @abstractmethod
    async def is_unrestricted(self, user_id: UserId) -> bool:
        ...
