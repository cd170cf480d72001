"""Composition root for customer-access.

``AccessControlBuilder`` assembles the registry, cache backend and managers,
repositories, resolver, access filters, surface registry and invalidation
service from settings. Any collaborator can be injected instead of built;
nothing touches the network until the first query or cache call.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..config.settings import AccessSettings
from ..database.connection import DatabaseManager
from ..database.protocols import Database
from ..features.cache.entities.protocols import CacheBackend
from ..features.cache.managers import (
    BranchCacheManager,
    CustomerCacheManager,
    EmployeeCacheManager,
    InvoiceCacheManager,
    MembershipFeaturesCacheManager,
    MembershipGroupsCacheManager,
    PaymentCacheManager,
)
from ..features.cache.services.backend_factory import create_cache_backend
from ..features.filters.adapters import (
    AgencyAccessFilter,
    AgencyCompanyFilter,
    AgencyCustomerFilter,
    AgencyEmployeeFilter,
    BranchAccessFilter,
    CompanyAccessFilter,
    CustomerAccessFilter,
)
from ..features.filters.entities.protocols import AccessFilter
from ..features.filters.services.query_surface_registry import QuerySurfaceRegistry
from ..features.hierarchy.entities.protocols import AgencyDirectory, HierarchyProbe, UserDirectory
from ..features.hierarchy.repositories import (
    AsyncPGAgencyDirectory,
    AsyncPGHierarchyProbe,
    InMemoryUserDirectory,
    NullAgencyDirectory,
)
from ..features.hierarchy.services.access_policy import AccessPolicy
from ..features.invalidation.services.hierarchy_invalidation_service import HierarchyInvalidationService
from ..features.relations.entities.protocols import BridgeRepository
from ..features.relations.entities.relation_config import RelationConfig
from ..features.relations.repositories.bridge_repository import AsyncPGBridgeRepository
from ..features.relations.services.relation_cache import RelationCacheProvider
from ..features.relations.services.relation_registry import RelationConfigRegistry
from ..features.relations.services.relation_resolver import RelationResolver
from ..features.relations.services.relation_statistics import RelationStatisticsService
from .agency_integration import AgencyIntegration
from .customer_relations import register_customer_relations

logger = logging.getLogger(__name__)


@dataclass
class EntityCaches:
    """Entity cache managers sharing one backend."""
    branch: BranchCacheManager
    employee: EmployeeCacheManager
    customer: CustomerCacheManager
    invoice: InvoiceCacheManager
    payment: PaymentCacheManager
    membership_features: MembershipFeaturesCacheManager
    membership_groups: MembershipGroupsCacheManager


@dataclass
class AccessControl:
    """Everything the surrounding application consumes."""
    settings: AccessSettings
    registry: RelationConfigRegistry
    resolver: RelationResolver
    statistics: RelationStatisticsService
    policy: AccessPolicy
    surfaces: QuerySurfaceRegistry
    invalidation: HierarchyInvalidationService
    caches: EntityCaches
    relation_caches: RelationCacheProvider
    cache_backend: CacheBackend
    agency_integration: AgencyIntegration
    database: Optional[Database] = None

    async def close(self) -> None:
        """Release the pool and cache connections this container owns."""
        if isinstance(self.database, DatabaseManager):
            await self.database.close_pool()
        disconnect = getattr(self.cache_backend, "disconnect", None)
        if disconnect is not None:
            await disconnect()


class AccessControlBuilder:
    """Builds an AccessControl container from settings and injected parts."""

    def __init__(self, settings: Optional[AccessSettings] = None):
        self.settings = settings or AccessSettings()
        self._database: Optional[Database] = None
        self._cache_backend: Optional[CacheBackend] = None
        self._user_directory: Optional[UserDirectory] = None
        self._agency_directory: Optional[AgencyDirectory] = None
        self._hierarchy_probe: Optional[HierarchyProbe] = None
        self._bridge_repository: Optional[BridgeRepository] = None
        self._relation_configs: List[RelationConfig] = []
        self._extra_filters: List[AccessFilter] = []
        self._include_default_relations = True

    def with_database(self, database: Database) -> "AccessControlBuilder":
        self._database = database
        return self

    def with_cache_backend(self, backend: CacheBackend) -> "AccessControlBuilder":
        self._cache_backend = backend
        return self

    def with_user_directory(self, directory: UserDirectory) -> "AccessControlBuilder":
        self._user_directory = directory
        return self

    def with_agency_directory(self, directory: AgencyDirectory) -> "AccessControlBuilder":
        self._agency_directory = directory
        return self

    def with_hierarchy_probe(self, probe: HierarchyProbe) -> "AccessControlBuilder":
        self._hierarchy_probe = probe
        return self

    def with_bridge_repository(self, repository: BridgeRepository) -> "AccessControlBuilder":
        self._bridge_repository = repository
        return self

    def with_relation(self, config: RelationConfig) -> "AccessControlBuilder":
        """Register an extra relation config (applied after the shipped ones)."""
        self._relation_configs.append(config)
        return self

    def with_filter(self, access_filter: AccessFilter) -> "AccessControlBuilder":
        self._extra_filters.append(access_filter)
        return self

    def without_default_relations(self) -> "AccessControlBuilder":
        self._include_default_relations = False
        return self

    def build(self) -> AccessControl:
        settings = self.settings
        database = self._database
        if database is None and self._needs_database():
            database = DatabaseManager(
                settings.database_url,
                min_size=settings.db_pool_min_size,
                max_size=settings.db_pool_max_size,
                command_timeout=settings.db_command_timeout,
            )

        backend = self._cache_backend or create_cache_backend(settings)
        prefix = settings.cache_key_prefix
        membership_features = MembershipFeaturesCacheManager(backend, prefix, settings.membership_cache_ttl)
        caches = EntityCaches(
            branch=BranchCacheManager(backend, prefix, settings.branch_cache_ttl),
            employee=EmployeeCacheManager(backend, prefix, settings.employee_cache_ttl),
            customer=CustomerCacheManager(backend, prefix, settings.customer_cache_ttl),
            invoice=InvoiceCacheManager(backend, prefix, settings.invoice_cache_ttl),
            payment=PaymentCacheManager(backend, prefix, settings.payment_cache_ttl),
            membership_features=membership_features,
            membership_groups=MembershipGroupsCacheManager(
                backend, prefix, settings.membership_cache_ttl, features_cache=membership_features
            ),
        )
        relation_caches = RelationCacheProvider(backend, prefix, settings.relation_cache_ttl)

        probe = self._hierarchy_probe or AsyncPGHierarchyProbe(
            database, settings.table_prefix, employee_cache=caches.employee
        )
        bridge_repository = self._bridge_repository or AsyncPGBridgeRepository(database, settings.table_prefix)
        agency_directory = self._agency_directory or self._default_agency_directory(database)
        users = self._user_directory or InMemoryUserDirectory()

        registry = RelationConfigRegistry()
        if self._include_default_relations:
            register_customer_relations(registry, settings.relation_cache_ttl)
        agency_integration = AgencyIntegration(agency_directory, settings.relation_cache_ttl)
        agency_integration.register(registry)
        registry.register_all(self._relation_configs)

        policy = AccessPolicy(
            users,
            probe,
            bypass_capabilities=settings.bypass_capabilities,
            customer_roles=settings.customer_roles,
            agency_roles=settings.agency_roles,
        )
        resolver = RelationResolver(
            registry,
            bridge_repository,
            probe,
            relation_caches,
            policy,
            fail_closed_unknown_entities=settings.fail_closed_unknown_entities,
        )
        statistics = RelationStatisticsService(registry, bridge_repository, probe, relation_caches, policy)

        surfaces = QuerySurfaceRegistry()
        for access_filter in self._default_filters(policy, resolver, agency_directory):
            surfaces.register(access_filter)
        for access_filter in self._extra_filters:
            surfaces.declare(access_filter.surface).register(access_filter)

        invalidation = HierarchyInvalidationService(
            registry,
            relation_caches,
            caches.branch,
            caches.employee,
            caches.customer,
            invoice_cache=caches.invoice,
            payment_cache=caches.payment,
            membership_features_cache=caches.membership_features,
            membership_groups_cache=caches.membership_groups,
        )

        logger.info(
            f"Access control built: {len(registry)} relation configs, "
            f"agency plugin {'available' if agency_directory.is_available else 'absent'}"
        )
        return AccessControl(
            settings=settings,
            registry=registry,
            resolver=resolver,
            statistics=statistics,
            policy=policy,
            surfaces=surfaces,
            invalidation=invalidation,
            caches=caches,
            relation_caches=relation_caches,
            cache_backend=backend,
            agency_integration=agency_integration,
            database=database,
        )

    def _needs_database(self) -> bool:
        return (
            self._hierarchy_probe is None
            or self._bridge_repository is None
            or (self._agency_directory is None and self.settings.agency_plugin_active)
        )

    def _default_agency_directory(self, database: Optional[Database]) -> AgencyDirectory:
        if self.settings.agency_plugin_active and database is not None:
            return AsyncPGAgencyDirectory(database, self.settings.table_prefix)
        return NullAgencyDirectory()

    def _default_filters(
        self,
        policy: AccessPolicy,
        resolver: RelationResolver,
        agency_directory: AgencyDirectory,
    ) -> List[AccessFilter]:
        return [
            CustomerAccessFilter(policy, resolver),
            AgencyCustomerFilter(policy, agency_directory, self.settings.table_prefix),
            BranchAccessFilter(policy, resolver),
            CompanyAccessFilter(policy, resolver),
            AgencyCompanyFilter(policy, agency_directory),
            AgencyAccessFilter(policy, resolver, agency_directory),
            AgencyEmployeeFilter(policy, resolver, agency_directory),
        ]
