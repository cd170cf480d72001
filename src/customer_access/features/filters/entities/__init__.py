"""Access filter entities."""

from .request_context import RequestContext
from .protocols import AccessFilter

__all__ = ["RequestContext", "AccessFilter"]
