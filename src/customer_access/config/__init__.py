"""Configuration for customer-access."""

from .constants import (
    HOUR_IN_SECONDS,
    CacheGroups,
    CacheTTL,
    CacheKeyTypes,
    Tables,
    EntityTypes,
    QuerySurfaces,
    CustomerRole,
    DEFAULT_AGENCY_ROLES,
    DEFAULT_BYPASS_CAPABILITIES,
    DENY_ALL_PREDICATE,
)
from .settings import AccessSettings, CacheBackendType, get_settings
from .logging_config import LoggingConfig, setup_logging, get_logger

__all__ = [
    "HOUR_IN_SECONDS",
    "CacheGroups",
    "CacheTTL",
    "CacheKeyTypes",
    "Tables",
    "EntityTypes",
    "QuerySurfaces",
    "CustomerRole",
    "DEFAULT_AGENCY_ROLES",
    "DEFAULT_BYPASS_CAPABILITIES",
    "DENY_ALL_PREDICATE",
    "AccessSettings",
    "CacheBackendType",
    "get_settings",
    "LoggingConfig",
    "setup_logging",
    "get_logger",
]
