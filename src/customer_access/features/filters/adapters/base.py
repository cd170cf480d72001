"""Base access filter.

Order of evaluation in ``apply``:

1. the table alias must be a plain identifier, otherwise the query is denied;
2. filters that need the agency plugin contribute nothing when it is absent;
3. platform administrators get nothing added;
4. the subclass builds one predicate, or None to add nothing.

Any error raised while building the predicate denies the query instead of
propagating into the query builder.
"""

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, List, Optional, Sequence, assert_never

from ..entities.request_context import RequestContext
from ...hierarchy.entities.protocols import AgencyDirectory
from ...hierarchy.services.access_policy import AccessPolicy
from ...relations.entities.access_decision import AccessDecision, Blocked, RestrictedTo, Unrestricted
from ....config.constants import DENY_ALL_PREDICATE
from ....database.utils import format_id_list, is_valid_identifier, validate_identifier

logger = logging.getLogger(__name__)


class BaseAccessFilter(ABC):
    """Common flow of every access filter."""

    SURFACE: ClassVar[str] = ""
    DEFAULT_ALIAS: ClassVar[str] = ""
    PRIORITY: ClassVar[int] = 10
    REQUIRES_AGENCY_PLUGIN: ClassVar[bool] = False

    def __init__(self, policy: AccessPolicy, agency_directory: Optional[AgencyDirectory] = None):
        self.policy = policy
        self.agency_directory = agency_directory

    @property
    def surface(self) -> str:
        return self.SURFACE

    @property
    def priority(self) -> int:
        return self.PRIORITY

    @property
    def name(self) -> str:
        return self.__class__.__name__

    async def apply(
        self,
        where_conditions: Sequence[str],
        request: RequestContext,
        table_alias: Optional[str] = None,
    ) -> List[str]:
        """Return ``where_conditions`` plus this filter's predicate, if any."""
        conditions = list(where_conditions)
        alias = table_alias or self.DEFAULT_ALIAS

        if self.REQUIRES_AGENCY_PLUGIN and not self._agency_available():
            logger.debug(f"{self.name}: agency plugin not available, no restriction added")
            return conditions

        try:
            if await self.policy.is_unrestricted(request.user_id):
                return conditions
            if not is_valid_identifier(alias):
                logger.error(f"{self.name}: invalid table alias {alias!r}, denying query")
                return self._append(conditions, DENY_ALL_PREDICATE)
            predicate = await self.build_predicate(request, alias)
        except Exception as e:
            logger.error(f"{self.name}: failed to build predicate for user {request.user_id}, denying query: {e}")
            predicate = DENY_ALL_PREDICATE

        return self._append(conditions, predicate)

    @abstractmethod
    async def build_predicate(self, request: RequestContext, alias: str) -> Optional[str]:
        """Predicate for the caller, None to add nothing."""
        ...

    def _agency_available(self) -> bool:
        return self.agency_directory is not None and self.agency_directory.is_available

    @staticmethod
    def _append(conditions: List[str], predicate: Optional[str]) -> List[str]:
        if predicate and predicate not in conditions:
            conditions.append(predicate)
        return conditions

    @staticmethod
    def column(alias: str, column: str) -> str:
        return f"{alias}.{validate_identifier(column, 'column')}"

    @staticmethod
    def decision_predicate(decision: AccessDecision, column_ref: str) -> Optional[str]:
        """Translate a decision into a predicate on ``column_ref``."""
        if isinstance(decision, Unrestricted):
            return None
        elif isinstance(decision, Blocked):
            return DENY_ALL_PREDICATE
        elif isinstance(decision, RestrictedTo):
            return f"{column_ref} IN ({format_id_list(decision.ids)})"
        else:
            assert_never(decision)

    @staticmethod
    def equals(column_ref: str, value: Optional[int]) -> str:
        """``column = value``, or the deny predicate when value is unknown."""
        if value is None:
            return DENY_ALL_PREDICATE
        return f"{column_ref} = {int(value)}"
