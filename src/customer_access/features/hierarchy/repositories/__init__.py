"""Hierarchy repositories."""

from .hierarchy_repository import AsyncPGHierarchyProbe
from .agency_directory import AsyncPGAgencyDirectory, NullAgencyDirectory
from .user_directory import InMemoryUserDirectory

__all__ = [
    "AsyncPGHierarchyProbe",
    "AsyncPGAgencyDirectory",
    "NullAgencyDirectory",
    "InMemoryUserDirectory",
]
