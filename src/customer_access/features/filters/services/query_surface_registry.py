"""Query surface registry.

Each consuming list query is a named surface. Access filters subscribe to a
surface with a priority; ``apply`` runs them in ascending priority order
(registration order breaks ties), each one receiving the previous one's
conditions.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from ..entities.protocols import AccessFilter
from ..entities.request_context import RequestContext
from ....config.constants import DENY_ALL_PREDICATE, QuerySurfaces
from ....core.exceptions import UnknownQuerySurfaceError

logger = logging.getLogger(__name__)

DEFAULT_SURFACES = (
    QuerySurfaces.CUSTOMERS,
    QuerySurfaces.BRANCHES,
    QuerySurfaces.COMPANIES,
    QuerySurfaces.AGENCIES,
    QuerySurfaces.AGENCY_EMPLOYEES,
)


@dataclass(frozen=True)
class _Subscription:
    priority: int
    sequence: int
    access_filter: AccessFilter


class QuerySurfaceRegistry:
    """Subscriptions of access filters to query surfaces."""

    def __init__(self, surfaces: Iterable[str] = DEFAULT_SURFACES):
        self._subscriptions: Dict[str, List[_Subscription]] = {surface: [] for surface in surfaces}
        self._sequence = 0

    def declare(self, surface: str) -> "QuerySurfaceRegistry":
        """Declare an additional surface filters may subscribe to."""
        self._subscriptions.setdefault(surface, [])
        return self

    def register(
        self,
        access_filter: AccessFilter,
        surface: Optional[str] = None,
        priority: Optional[int] = None,
    ) -> "QuerySurfaceRegistry":
        """Subscribe a filter to a surface (its own surface by default)."""
        surface = surface or access_filter.surface
        if surface not in self._subscriptions:
            raise UnknownQuerySurfaceError(
                f"Query surface '{surface}' is not declared",
                details={"surface": surface, "declared": sorted(self._subscriptions)}
            )

        subscription = _Subscription(
            priority=access_filter.priority if priority is None else priority,
            sequence=self._sequence,
            access_filter=access_filter,
        )
        self._sequence += 1

        subscriptions = self._subscriptions[surface]
        subscriptions.append(subscription)
        subscriptions.sort(key=lambda item: (item.priority, item.sequence))
        logger.debug(f"Registered {type(access_filter).__name__} on '{surface}' with priority {subscription.priority}")
        return self

    def filters_for(self, surface: str) -> List[AccessFilter]:
        return [item.access_filter for item in self._subscriptions.get(surface, [])]

    def surfaces(self) -> List[str]:
        return list(self._subscriptions)

    async def apply(
        self,
        surface: str,
        where_conditions: Sequence[str],
        request: RequestContext,
        table_alias: Optional[str] = None,
    ) -> List[str]:
        """Run every filter of a surface over the conditions.

        An undeclared surface denies the query, since no filter could
        have restricted it.
        """
        conditions = list(where_conditions)
        if surface not in self._subscriptions:
            logger.error(f"apply() called for undeclared query surface '{surface}', denying query")
            if DENY_ALL_PREDICATE not in conditions:
                conditions.append(DENY_ALL_PREDICATE)
            return conditions

        for item in self._subscriptions[surface]:
            try:
                conditions = await item.access_filter.apply(conditions, request, table_alias)
            except Exception as e:
                logger.error(f"{type(item.access_filter).__name__} failed on '{surface}', denying query: {e}")
                if DENY_ALL_PREDICATE not in conditions:
                    conditions.append(DENY_ALL_PREDICATE)
        return conditions
