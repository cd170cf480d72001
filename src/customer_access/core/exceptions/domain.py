"""Domain exceptions for customer-access.

Raised at configuration and registration time, never from a resolution or
filtering call.
"""

from .base import CustomerAccessError


class ConfigurationError(CustomerAccessError):
    """Raised when access-control configuration is invalid."""
    pass


class RelationConfigError(ConfigurationError):
    """Raised when a relation config is incomplete or malformed."""
    pass


class InvalidIdentifierError(ConfigurationError):
    """Raised when a table, column or alias name is not a safe SQL identifier."""
    pass


class UnknownEntityTypeError(CustomerAccessError):
    """Raised when an operation needs a relation config that is not registered."""

    def __init__(self, entity_type: str):
        super().__init__(
            f"Entity type '{entity_type}' is not registered",
            details={"entity_type": entity_type}
        )
        self.entity_type = entity_type


class UnknownQuerySurfaceError(ConfigurationError):
    """Raised when an adapter subscribes to an undeclared query surface."""
    pass
