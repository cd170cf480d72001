"""Exception hierarchy for customer-access."""

from .base import CustomerAccessError, create_error_payload
from .domain import (
    ConfigurationError,
    RelationConfigError,
    InvalidIdentifierError,
    UnknownEntityTypeError,
    UnknownQuerySurfaceError,
)
from .infrastructure import (
    CacheError,
    CacheConnectionError,
    CacheSerializationError,
    DatabaseError,
    DatabaseConnectionError,
    QueryError,
)

__all__ = [
    "CustomerAccessError",
    "create_error_payload",
    "ConfigurationError",
    "RelationConfigError",
    "InvalidIdentifierError",
    "UnknownEntityTypeError",
    "UnknownQuerySurfaceError",
    "CacheError",
    "CacheConnectionError",
    "CacheSerializationError",
    "DatabaseError",
    "DatabaseConnectionError",
    "QueryError",
]
