"""Hierarchy feature for customer-access.

Direct probes of the customer hierarchy and the agency plugin, plus the
access policy that classifies callers.
"""

from .entities import (
    ScopeNuance,
    BranchBridge,
    EmployeeContext,
    CallerScope,
    HierarchyProbe,
    UserDirectory,
    AgencyDirectory,
)
from .repositories import (
    AsyncPGHierarchyProbe,
    AsyncPGAgencyDirectory,
    NullAgencyDirectory,
    InMemoryUserDirectory,
)
from .services import AccessPolicy

__all__ = [
    "ScopeNuance",
    "BranchBridge",
    "EmployeeContext",
    "CallerScope",
    "HierarchyProbe",
    "UserDirectory",
    "AgencyDirectory",
    "AsyncPGHierarchyProbe",
    "AsyncPGAgencyDirectory",
    "NullAgencyDirectory",
    "InMemoryUserDirectory",
    "AccessPolicy",
]
