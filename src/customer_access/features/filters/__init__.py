"""Access filters feature for customer-access.

Turns access decisions and role nuance into SQL predicates for the
consuming list queries.
"""

from .entities import RequestContext, AccessFilter
from .adapters import (
    BaseAccessFilter,
    CustomerAccessFilter,
    BranchAccessFilter,
    CompanyAccessFilter,
    AgencyAccessFilter,
    AgencyEmployeeFilter,
    AgencyCustomerFilter,
    AgencyCompanyFilter,
)
from .services import QuerySurfaceRegistry, DEFAULT_SURFACES

__all__ = [
    "RequestContext",
    "AccessFilter",
    "BaseAccessFilter",
    "CustomerAccessFilter",
    "BranchAccessFilter",
    "CompanyAccessFilter",
    "AgencyAccessFilter",
    "AgencyEmployeeFilter",
    "AgencyCustomerFilter",
    "AgencyCompanyFilter",
    "QuerySurfaceRegistry",
    "DEFAULT_SURFACES",
]
