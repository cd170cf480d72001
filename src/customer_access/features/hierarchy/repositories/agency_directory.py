"""Agency plugin directory.

``AsyncPGAgencyDirectory`` reads the agency plugin's tables when the plugin
is installed. ``NullAgencyDirectory`` stands in when it is not.
"""

import logging
from typing import Optional

from ....config.constants import Tables
from ....core.exceptions import QueryError
from ....core.value_objects import UserId
from ....database.protocols import Database
from ....database.utils import validate_identifier

logger = logging.getLogger(__name__)


class AsyncPGAgencyDirectory:
    """AsyncPG implementation of AgencyDirectory protocol."""

    def __init__(self, database: Database, table_prefix: str = "wp_"):
        self.database = database
        if table_prefix:
            validate_identifier(table_prefix, "table prefix")
        self.agencies_table = f"{table_prefix}{Tables.AGENCIES}"
        self.agency_employees_table = f"{table_prefix}{Tables.AGENCY_EMPLOYEES}"
        self.divisions_table = f"{table_prefix}{Tables.AGENCY_DIVISIONS}"

    @property
    def is_available(self) -> bool:
        return True

    async def get_user_agency_id(self, user_id: UserId) -> Optional[int]:
        """Agency owned by the user, else the agency the user is employed by."""
        owner_query = f"SELECT id FROM {self.agencies_table} WHERE user_id = $1 ORDER BY id LIMIT 1"
        employee_query = f"""
            SELECT agency_id FROM {self.agency_employees_table}
            WHERE user_id = $1 AND agency_id IS NOT NULL
            ORDER BY id
            LIMIT 1
        """
        try:
            agency_id = await self.database.fetchval(owner_query, int(user_id))
            if agency_id is None:
                agency_id = await self.database.fetchval(employee_query, int(user_id))
        except Exception as e:
            logger.error(f"Failed to load agency of user {user_id}: {e}")
            raise QueryError(f"Failed to load user agency: {e}", details={"user_id": int(user_id)})
        return int(agency_id) if agency_id is not None else None

    async def get_agency_province_id(self, agency_id: int) -> Optional[int]:
        query = f"SELECT province_id FROM {self.agencies_table} WHERE id = $1"
        return await self._fetch_optional_int(query, agency_id, "agency province")

    async def get_division_agency_id(self, division_id: int) -> Optional[int]:
        query = f"SELECT agency_id FROM {self.divisions_table} WHERE id = $1"
        return await self._fetch_optional_int(query, division_id, "division agency")

    async def _fetch_optional_int(self, query: str, value: int, what: str) -> Optional[int]:
        try:
            result = await self.database.fetchval(query, int(value))
        except Exception as e:
            logger.error(f"Failed to load {what} for {value}: {e}")
            raise QueryError(f"Failed to load {what}: {e}", details={"id": value})
        return int(result) if result is not None else None


class NullAgencyDirectory:
    """Agency plugin not installed: no agency data, no agency restrictions."""

    @property
    def is_available(self) -> bool:
        return False

    async def get_user_agency_id(self, user_id: UserId) -> Optional[int]:
        return None

    async def get_agency_province_id(self, agency_id: int) -> Optional[int]:
        return None

    async def get_division_agency_id(self, division_id: int) -> Optional[int]:
        return None
