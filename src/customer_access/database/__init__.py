"""Database access for customer-access."""

from .connection import DatabaseManager
from .protocols import Database
from .utils import is_valid_identifier, validate_identifier, coerce_ids, format_id_list

__all__ = [
    "DatabaseManager",
    "Database",
    "is_valid_identifier",
    "validate_identifier",
    "coerce_ids",
    "format_id_list",
]
