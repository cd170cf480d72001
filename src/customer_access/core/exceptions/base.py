"""Base exceptions for customer-access.

All exceptions inherit from CustomerAccessError and carry an error code and
structured details for logging.
"""

from typing import Any, Dict, Optional


class CustomerAccessError(Exception):
    """Base exception for all customer-access errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def create_error_payload(exception: CustomerAccessError) -> Dict[str, Any]:
    """Create a structured payload from an exception, used in log records."""
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
