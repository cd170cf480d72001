"""Access decision: the tri-state result of resolving a user against an entity type.

``Unrestricted`` means no filtering, ``Blocked`` means nothing is visible and
``RestrictedTo`` carries the exact visible id set, which is never empty.
Consumers match on the three classes with ``isinstance`` and close the chain
with ``assert_never`` so a new variant fails type checking everywhere.
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Optional, Union, assert_never


@dataclass(frozen=True)
class Unrestricted:
    """No restriction requested: the caller sees every row."""

    def permits(self, entity_id: int) -> bool:
        return True


@dataclass(frozen=True)
class Blocked:
    """Restriction requested and nothing matched: the caller sees no row."""

    def permits(self, entity_id: int) -> bool:
        return False


@dataclass(frozen=True)
class RestrictedTo:
    """The caller sees exactly these ids."""

    ids: FrozenSet[int]

    def __post_init__(self) -> None:
        ids = frozenset(int(value) for value in self.ids)
        if not ids:
            raise ValueError("RestrictedTo requires at least one id, use Blocked for an empty set")
        object.__setattr__(self, "ids", ids)

    @classmethod
    def of(cls, ids: Iterable[int]) -> "AccessDecision":
        """RestrictedTo for a non-empty id collection, Blocked otherwise."""
        ids = frozenset(int(value) for value in ids)
        return cls(ids) if ids else BLOCKED

    def permits(self, entity_id: int) -> bool:
        return int(entity_id) in self.ids


AccessDecision = Union[Unrestricted, Blocked, RestrictedTo]

UNRESTRICTED = Unrestricted()
BLOCKED = Blocked()


def decision_to_payload(decision: AccessDecision) -> Dict[str, Any]:
    """Encode a decision as a JSON-compatible dict for the cache."""
    if isinstance(decision, Unrestricted):
        return {"kind": "unrestricted"}
    elif isinstance(decision, Blocked):
        return {"kind": "blocked"}
    elif isinstance(decision, RestrictedTo):
        return {"kind": "restricted", "ids": sorted(decision.ids)}
    else:
        assert_never(decision)


def decision_from_payload(payload: Any) -> Optional[AccessDecision]:
    """Decode a cached payload, None when it is not a valid decision."""
    if not isinstance(payload, dict):
        return None

    kind = payload.get("kind")
    if kind == "unrestricted":
        return UNRESTRICTED
    if kind == "blocked":
        return BLOCKED
    if kind == "restricted":
        ids = payload.get("ids")
        if not isinstance(ids, list) or not ids:
            return None
        try:
            return RestrictedTo(frozenset(ids))
        except (TypeError, ValueError):
            return None
    return None
