"""Infrastructure-specific exceptions for customer-access.

Errors from the cache backend and the database. Callers inside the package
convert them to cache misses or Blocked decisions.
"""

from .base import CustomerAccessError


# Cache Errors
class CacheError(CustomerAccessError):
    """Base class for cache-related errors."""
    pass


class CacheConnectionError(CacheError):
    """Raised when cache connection fails."""
    pass


class CacheSerializationError(CacheError):
    """Raised when cache value serialization/deserialization fails."""
    pass


# Database Errors
class DatabaseError(CustomerAccessError):
    """Base class for database errors."""
    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when the connection pool cannot be created or used."""
    pass


class QueryError(DatabaseError):
    """Raised when a hierarchy or bridge query fails."""
    pass
