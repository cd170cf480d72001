"""Value objects for customer-access."""

from .identifiers import UserId, TenantId

__all__ = ["UserId", "TenantId"]
