"""Relation config registry.

Collaborators register ``entity_type -> RelationConfig`` entries at any
time before (or after) the resolver's first call; lookups always read the
live map, so late registration is picked up by the next resolution.

Registering an entity type twice replaces the earlier config
(last-write-wins). The replacement is logged so an accidental collision
between two integrations is visible.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from ..entities.relation_config import RelationConfig
from ....core.exceptions import RelationConfigError, UnknownEntityTypeError

logger = logging.getLogger(__name__)


class RelationConfigRegistry:
    """Map of entity type to relation config."""

    def __init__(self) -> None:
        self._configs: Dict[str, RelationConfig] = {}

    def register(
        self,
        entity_type: str,
        config: Union[RelationConfig, Mapping[str, Any]],
    ) -> "RelationConfigRegistry":
        """Register (or replace) the config for an entity type.

        Returns the registry so registrations can be chained.
        """
        if isinstance(config, Mapping):
            config = RelationConfig.from_mapping(entity_type, config)
        elif not isinstance(config, RelationConfig):
            raise RelationConfigError(
                f"Unsupported relation config for '{entity_type}': {type(config).__name__}"
            )

        if config.entity_type != entity_type:
            raise RelationConfigError(
                f"Config entity type '{config.entity_type}' registered under '{entity_type}'",
                details={"entity_type": entity_type, "config_entity_type": config.entity_type}
            )

        previous = self._configs.get(entity_type)
        if previous is not None and previous != config:
            logger.info(f"Relation config for '{entity_type}' replaced (last registration wins)")

        self._configs[entity_type] = config
        logger.debug(f"Registered relation config for '{entity_type}' on {config.bridge_table}")
        return self

    def register_all(self, configs: List[RelationConfig]) -> "RelationConfigRegistry":
        for config in configs:
            self.register(config.entity_type, config)
        return self

    def get(self, entity_type: str) -> Optional[RelationConfig]:
        """Config for an entity type, None when not registered."""
        return self._configs.get(entity_type)

    def require(self, entity_type: str) -> RelationConfig:
        """Config for an entity type, raising UnknownEntityTypeError when absent."""
        config = self._configs.get(entity_type)
        if config is None:
            raise UnknownEntityTypeError(entity_type)
        return config

    def entity_types(self) -> List[str]:
        return list(self._configs)

    def configs(self) -> List[RelationConfig]:
        return list(self._configs.values())

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._configs

    def __len__(self) -> int:
        return len(self._configs)
