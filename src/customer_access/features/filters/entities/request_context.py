"""Request context handed to access filters."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ....core.value_objects import UserId


@dataclass(frozen=True)
class RequestContext:
    """The acting user and the list request parameters (search, order, filters)."""
    user_id: UserId
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def parameter(self, name: str, default: Optional[Any] = None) -> Any:
        return self.parameters.get(name, default)
