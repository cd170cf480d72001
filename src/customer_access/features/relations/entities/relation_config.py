"""Relation config entity.

A relation config tells the resolver how to compute accessible ids for one
entity type from one bridge table: the bridge rows carrying ``tenant_column``
values the user belongs to yield the accessible ``entity_column`` values.
"""

from dataclasses import dataclass
from typing import Any, Mapping

from ....config.constants import CacheGroups, CacheTTL
from ....core.exceptions import RelationConfigError
from ....database.utils import validate_identifier


@dataclass(frozen=True)
class RelationConfig:
    """Bridge description for one entity type."""

    entity_type: str
    bridge_table: str
    entity_column: str
    tenant_column: str = "customer_id"
    cache_group: str = CacheGroups.ENTITY_RELATIONS
    cache_ttl: int = CacheTTL.RELATION
    filter_enabled: bool = True

    def __post_init__(self) -> None:
        if not self.entity_type or not isinstance(self.entity_type, str):
            raise RelationConfigError("Relation config requires an entity_type")
        if not self.cache_group:
            raise RelationConfigError(
                f"Relation config for '{self.entity_type}' requires a cache_group",
                details={"entity_type": self.entity_type}
            )
        if self.cache_ttl <= 0:
            raise RelationConfigError(
                f"Relation config for '{self.entity_type}' requires a positive cache_ttl",
                details={"entity_type": self.entity_type, "cache_ttl": self.cache_ttl}
            )

        validate_identifier(self.bridge_table, "table")
        validate_identifier(self.entity_column, "column")
        validate_identifier(self.tenant_column, "column")

    @classmethod
    def from_mapping(cls, entity_type: str, data: Mapping[str, Any]) -> "RelationConfig":
        """Build a config from a plain mapping.

        Accepts ``customer_column`` for ``tenant_column`` and ``access_filter``
        for ``filter_enabled``.
        """
        try:
            return cls(
                entity_type=entity_type,
                bridge_table=data["bridge_table"],
                entity_column=data["entity_column"],
                tenant_column=data.get("tenant_column", data.get("customer_column", "customer_id")),
                cache_group=data.get("cache_group", CacheGroups.ENTITY_RELATIONS),
                cache_ttl=int(data.get("cache_ttl", CacheTTL.RELATION)),
                filter_enabled=bool(data.get("filter_enabled", data.get("access_filter", True))),
            )
        except KeyError as e:
            raise RelationConfigError(
                f"Relation config for '{entity_type}' is missing {e.args[0]}",
                details={"entity_type": entity_type, "missing": e.args[0]}
            )
