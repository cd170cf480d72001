"""In-memory user directory.

For composition roots that already hold the current user's roles and
capabilities (for example from a session), or for tests.
"""

from typing import Dict, FrozenSet, Iterable

from ....core.value_objects import UserId


class InMemoryUserDirectory:
    """Dict-backed implementation of UserDirectory protocol."""

    def __init__(self):
        self._roles: Dict[int, FrozenSet[str]] = {}
        self._capabilities: Dict[int, FrozenSet[str]] = {}

    def set_user(
        self,
        user_id: int,
        roles: Iterable[str] = (),
        capabilities: Iterable[str] = (),
    ) -> "InMemoryUserDirectory":
        self._roles[int(user_id)] = frozenset(roles)
        self._capabilities[int(user_id)] = frozenset(capabilities)
        return self

    def remove_user(self, user_id: int) -> None:
        self._roles.pop(int(user_id), None)
        self._capabilities.pop(int(user_id), None)

    async def get_roles(self, user_id: UserId) -> FrozenSet[str]:
        return self._roles.get(int(user_id), frozenset())

    async def get_capabilities(self, user_id: UserId) -> FrozenSet[str]:
        return self._capabilities.get(int(user_id), frozenset())
