"""Access filter adapters, one or more per query surface."""

from .base import BaseAccessFilter
from .customer_filters import CustomerAccessFilter, BranchAccessFilter, CompanyAccessFilter
from .agency_filters import (
    AgencyAccessFilter,
    AgencyEmployeeFilter,
    AgencyCustomerFilter,
    AgencyCompanyFilter,
)

__all__ = [
    "BaseAccessFilter",
    "CustomerAccessFilter",
    "BranchAccessFilter",
    "CompanyAccessFilter",
    "AgencyAccessFilter",
    "AgencyEmployeeFilter",
    "AgencyCustomerFilter",
    "AgencyCompanyFilter",
]
