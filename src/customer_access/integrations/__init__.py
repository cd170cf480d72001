"""Integrations and composition root."""

from .agency_integration import AgencyIntegration, agency_relation_config
from .customer_relations import customer_relation_configs, register_customer_relations
from .bootstrap import AccessControl, AccessControlBuilder, EntityCaches

__all__ = [
    "AgencyIntegration",
    "agency_relation_config",
    "customer_relation_configs",
    "register_customer_relations",
    "AccessControl",
    "AccessControlBuilder",
    "EntityCaches",
]
