"""Per-entity cache managers."""

from .branch_cache import BranchCacheManager
from .customer_cache import CustomerCacheManager
from .employee_cache import EmployeeCacheManager
from .invoice_cache import InvoiceCacheManager
from .membership_cache import MembershipFeaturesCacheManager, MembershipGroupsCacheManager
from .payment_cache import PaymentCacheManager

__all__ = [
    "BranchCacheManager",
    "CustomerCacheManager",
    "EmployeeCacheManager",
    "InvoiceCacheManager",
    "MembershipFeaturesCacheManager",
    "MembershipGroupsCacheManager",
    "PaymentCacheManager",
]
