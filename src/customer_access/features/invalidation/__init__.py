"""Invalidation triggers for customer-access."""

from .services import HierarchyInvalidationService

__all__ = ["HierarchyInvalidationService"]
