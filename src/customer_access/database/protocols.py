"""Database access contract used by the repositories."""

from typing import Any, List, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class Database(Protocol):
    """Read side of a connection pool.

    DatabaseManager satisfies it; tests pass an AsyncMock.
    """

    async def fetch(self, query: str, *args, timeout: float = None) -> List[Mapping[str, Any]]:
        ...

    async def fetchrow(self, query: str, *args, timeout: float = None) -> Optional[Mapping[str, Any]]:
        ...

    async def fetchval(self, query: str, *args, column: int = 0, timeout: float = None) -> Any:
        ...
