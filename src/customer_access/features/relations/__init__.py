"""Relations feature for customer-access.

- entities/: relation config, access decision union and collaborator protocols
- repositories/: asyncpg bridge table queries
- services/: config registry, decision caches, resolver and statistics
"""

from .entities import (
    AccessDecision,
    Unrestricted,
    Blocked,
    RestrictedTo,
    UNRESTRICTED,
    BLOCKED,
    RelationConfig,
    BridgeRepository,
    TenantMembership,
    BypassPolicy,
)
from .repositories import AsyncPGBridgeRepository
from .services import (
    RelationCacheManager,
    RelationCacheProvider,
    RelationConfigRegistry,
    RelationResolver,
    RelationStatisticsService,
)

__all__ = [
    "AccessDecision",
    "Unrestricted",
    "Blocked",
    "RestrictedTo",
    "UNRESTRICTED",
    "BLOCKED",
    "RelationConfig",
    "BridgeRepository",
    "TenantMembership",
    "BypassPolicy",
    "AsyncPGBridgeRepository",
    "RelationCacheManager",
    "RelationCacheProvider",
    "RelationConfigRegistry",
    "RelationResolver",
    "RelationStatisticsService",
]
