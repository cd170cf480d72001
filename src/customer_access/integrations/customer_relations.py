"""Relation configs shipped with the customer plugin."""

from typing import List, Optional

from ..config.constants import CacheGroups, CacheTTL, EntityTypes, Tables
from ..features.relations.entities.relation_config import RelationConfig
from ..features.relations.services.relation_registry import RelationConfigRegistry


def customer_relation_configs(cache_ttl: Optional[int] = None) -> List[RelationConfig]:
    """Configs for customers, branches and companies.

    Companies are branches seen from outside the customer, so both read the
    branch table.
    """
    ttl = cache_ttl or CacheTTL.RELATION
    return [
        RelationConfig(
            entity_type=EntityTypes.CUSTOMER,
            bridge_table=Tables.CUSTOMERS,
            entity_column="id",
            tenant_column="id",
            cache_group=CacheGroups.ENTITY_RELATIONS,
            cache_ttl=ttl,
        ),
        RelationConfig(
            entity_type=EntityTypes.BRANCH,
            bridge_table=Tables.BRANCHES,
            entity_column="id",
            tenant_column="customer_id",
            cache_group=CacheGroups.ENTITY_RELATIONS,
            cache_ttl=ttl,
        ),
        RelationConfig(
            entity_type=EntityTypes.COMPANY,
            bridge_table=Tables.BRANCHES,
            entity_column="id",
            tenant_column="customer_id",
            cache_group=CacheGroups.ENTITY_RELATIONS,
            cache_ttl=ttl,
        ),
    ]


def register_customer_relations(registry: RelationConfigRegistry, cache_ttl: Optional[int] = None) -> None:
    registry.register_all(customer_relation_configs(cache_ttl))
