"""
SQL identifier helpers.

Relation configs and callers supply table, column and alias names that end
up inside SQL text, so every one of them passes through here first.
"""
import re
from typing import Iterable, List

from ..core.exceptions import InvalidIdentifierError

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def is_valid_identifier(name: str) -> bool:
    """Check whether ``name`` is a plain SQL identifier."""
    return isinstance(name, str) and bool(IDENTIFIER_PATTERN.match(name))


def validate_identifier(name: str, kind: str = "identifier") -> str:
    """Return ``name`` unchanged or raise InvalidIdentifierError."""
    if not is_valid_identifier(name):
        raise InvalidIdentifierError(
            f"Invalid SQL {kind}: {name!r}",
            details={"kind": kind, "value": name}
        )
    return name


def coerce_ids(ids: Iterable) -> List[int]:
    """Coerce ids to sorted, de-duplicated integers for embedding in predicates."""
    return sorted({int(value) for value in ids})


def format_id_list(ids: Iterable) -> str:
    """Render ids as a comma separated integer list."""
    return ",".join(str(value) for value in coerce_ids(ids))
