"""AsyncPG bridge repository.

Table and column names come from a validated RelationConfig and the
installation table prefix; every value is a positional parameter.
"""

import logging
from typing import List, Optional, Sequence

from ..entities.relation_config import RelationConfig
from ....core.exceptions import QueryError
from ....database.protocols import Database
from ....database.utils import coerce_ids, validate_identifier

logger = logging.getLogger(__name__)


class AsyncPGBridgeRepository:
    """AsyncPG implementation of BridgeRepository protocol."""

    def __init__(self, database: Database, table_prefix: str = "wp_"):
        self.database = database
        self.table_prefix = table_prefix
        if table_prefix:
            validate_identifier(table_prefix, "table prefix")

    def _table(self, config: RelationConfig) -> str:
        return f"{self.table_prefix}{config.bridge_table}"

    async def fetch_entity_ids(self, config: RelationConfig, tenant_ids: Sequence[int]) -> List[int]:
        """Distinct non-null entity ids bridged to any of the tenants."""
        if not tenant_ids:
            return []

        query = f"""
            SELECT DISTINCT b.{config.entity_column} AS entity_id
            FROM {self._table(config)} b
            WHERE b.{config.tenant_column} = ANY($1::bigint[])
              AND b.{config.entity_column} IS NOT NULL
        """
        try:
            rows = await self.database.fetch(query, coerce_ids(tenant_ids))
        except Exception as e:
            logger.error(f"Failed to fetch {config.entity_type} ids from {self._table(config)}: {e}")
            raise QueryError(
                f"Failed to fetch accessible {config.entity_type} ids: {e}",
                details={"entity_type": config.entity_type, "bridge_table": config.bridge_table}
            )
        return coerce_ids(row["entity_id"] for row in rows)

    async def count_tenants_for_entity(
        self,
        config: RelationConfig,
        entity_id: int,
        tenant_ids: Optional[Sequence[int]] = None,
    ) -> int:
        """Number of distinct tenants bridged to one entity id."""
        return await self._count(
            f"COUNT(DISTINCT b.{config.tenant_column})", config, entity_id, tenant_ids
        )

    async def count_bridge_rows_for_entity(
        self,
        config: RelationConfig,
        entity_id: int,
        tenant_ids: Optional[Sequence[int]] = None,
    ) -> int:
        """Number of bridge rows pointing at one entity id."""
        return await self._count("COUNT(*)", config, entity_id, tenant_ids)

    async def _count(
        self,
        aggregate: str,
        config: RelationConfig,
        entity_id: int,
        tenant_ids: Optional[Sequence[int]],
    ) -> int:
        query = f"""
            SELECT {aggregate}
            FROM {self._table(config)} b
            WHERE b.{config.entity_column} = $1
        """
        args = [int(entity_id)]
        if tenant_ids is not None:
            query += f" AND b.{config.tenant_column} = ANY($2::bigint[])"
            args.append(coerce_ids(tenant_ids))

        try:
            return int(await self.database.fetchval(query, *args) or 0)
        except Exception as e:
            logger.error(f"Failed to count {config.entity_type} {entity_id} relations: {e}")
            raise QueryError(
                f"Failed to count {config.entity_type} relations: {e}",
                details={"entity_type": config.entity_type, "entity_id": entity_id}
            )
