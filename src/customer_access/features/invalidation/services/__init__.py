"""Invalidation services."""

from .hierarchy_invalidation_service import HierarchyInvalidationService

__all__ = ["HierarchyInvalidationService"]
