"""Version information for customer-access."""

__version__ = "1.0.0"
