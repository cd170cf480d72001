"""Hierarchy entities."""

from .hierarchy import ScopeNuance, BranchBridge, EmployeeContext, CallerScope
from .protocols import HierarchyProbe, UserDirectory, AgencyDirectory

__all__ = [
    "ScopeNuance",
    "BranchBridge",
    "EmployeeContext",
    "CallerScope",
    "HierarchyProbe",
    "UserDirectory",
    "AgencyDirectory",
]
