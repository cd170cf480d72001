"""Customer-Access - access-control relation resolver for the multi-tenant customer plugin.

Computes which customers, branches, companies and agencies a user may see
across the customer hierarchy, turns those decisions into SQL predicates for
the consuming list queries, and keeps the per-entity caches coherent as the
hierarchy mutates.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import (
    AccessSettings,
    CacheBackendType,
    get_settings,
    EntityTypes,
    QuerySurfaces,
    CustomerRole,
)

from .core.exceptions import (
    CustomerAccessError,
    ConfigurationError,
    RelationConfigError,
    InvalidIdentifierError,
    UnknownEntityTypeError,
    UnknownQuerySurfaceError,
    CacheError,
    DatabaseError,
    QueryError,
)

from .core.value_objects import UserId, TenantId

from .features.relations import (
    AccessDecision,
    Unrestricted,
    Blocked,
    RestrictedTo,
    UNRESTRICTED,
    BLOCKED,
    RelationConfig,
    RelationConfigRegistry,
    RelationResolver,
    RelationStatisticsService,
)

from .features.filters import RequestContext, QuerySurfaceRegistry

from .features.invalidation import HierarchyInvalidationService

from .integrations import AccessControl, AccessControlBuilder, AgencyIntegration

__all__ = [
    "__version__",
    "AccessSettings",
    "CacheBackendType",
    "get_settings",
    "EntityTypes",
    "QuerySurfaces",
    "CustomerRole",
    "CustomerAccessError",
    "ConfigurationError",
    "RelationConfigError",
    "InvalidIdentifierError",
    "UnknownEntityTypeError",
    "UnknownQuerySurfaceError",
    "CacheError",
    "DatabaseError",
    "QueryError",
    "UserId",
    "TenantId",
    "AccessDecision",
    "Unrestricted",
    "Blocked",
    "RestrictedTo",
    "UNRESTRICTED",
    "BLOCKED",
    "RelationConfig",
    "RelationConfigRegistry",
    "RelationResolver",
    "RelationStatisticsService",
    "RequestContext",
    "QuerySurfaceRegistry",
    "HierarchyInvalidationService",
    "AccessControl",
    "AccessControlBuilder",
    "AgencyIntegration",
]
