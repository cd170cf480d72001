"""Agency plugin integration.

Registers the ``agency`` relation config: agencies are reachable from a
customer through the ``agency_id`` of its branches. Nothing is registered
when the agency plugin is not available.
"""

import logging
from typing import Optional

from ..config.constants import CacheGroups, CacheTTL, EntityTypes, Tables
from ..features.hierarchy.entities.protocols import AgencyDirectory
from ..features.relations.entities.relation_config import RelationConfig
from ..features.relations.services.relation_registry import RelationConfigRegistry

logger = logging.getLogger(__name__)


def agency_relation_config(cache_ttl: Optional[int] = None) -> RelationConfig:
    return RelationConfig(
        entity_type=EntityTypes.AGENCY,
        bridge_table=Tables.BRANCHES,
        entity_column="agency_id",
        tenant_column="customer_id",
        cache_group=CacheGroups.AGENCY_RELATIONS,
        cache_ttl=cache_ttl or CacheTTL.RELATION,
    )


class AgencyIntegration:
    """Wires the agency plugin into the customer access layer."""

    def __init__(self, agency_directory: AgencyDirectory, cache_ttl: Optional[int] = None):
        self.agency_directory = agency_directory
        self.cache_ttl = cache_ttl

    @property
    def is_available(self) -> bool:
        return self.agency_directory.is_available

    def register(self, registry: RelationConfigRegistry) -> bool:
        """Register the agency relation config, False when the plugin is absent."""
        if not self.is_available:
            logger.debug("Agency plugin not available, agency relation not registered")
            return False

        registry.register(EntityTypes.AGENCY, agency_relation_config(self.cache_ttl))
        return True
