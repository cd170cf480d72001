"""Hierarchy services."""

from .access_policy import AccessPolicy

__all__ = ["AccessPolicy"]
