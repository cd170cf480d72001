"""Access filter services."""

from .query_surface_registry import QuerySurfaceRegistry, DEFAULT_SURFACES

__all__ = ["QuerySurfaceRegistry", "DEFAULT_SURFACES"]
