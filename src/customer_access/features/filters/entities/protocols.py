"""Access filter protocol."""

from abc import abstractmethod
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from .request_context import RequestContext


@runtime_checkable
class AccessFilter(Protocol):
    """Adds access predicates to the WHERE conditions of one query surface.

    ``apply`` returns a new list and leaves ``where_conditions`` untouched.
    Applying a filter twice matches the same rows as applying it once.
    """

    surface: str
    priority: int

    @abstractmethod
    async def apply(
        self,
        where_conditions: Sequence[str],
        request: RequestContext,
        table_alias: Optional[str] = None,
    ) -> List[str]:
        ...
