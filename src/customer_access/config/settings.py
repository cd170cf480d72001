"""
Settings for customer-access.

Pydantic settings loaded from the environment (prefix ``CUSTOMER_ACCESS_``)
or a ``.env`` file. The composition root takes an explicit instance, so
``get_settings()`` is only a convenience for applications.
"""
from enum import Enum
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    CacheTTL,
    CustomerRole,
    DEFAULT_AGENCY_ROLES,
    DEFAULT_BYPASS_CAPABILITIES,
)


class CacheBackendType(str, Enum):
    """Supported cache backends."""
    MEMORY = "memory"
    REDIS = "redis"


class AccessSettings(BaseSettings):
    """Configuration for the resolver, cache managers and adapters."""

    model_config = SettingsConfigDict(
        env_prefix="CUSTOMER_ACCESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database
    database_url: str = Field(default="", description="asyncpg DSN for the hierarchy tables")
    table_prefix: str = Field(default="wp_", description="Installation table prefix")
    db_pool_min_size: int = Field(default=2)
    db_pool_max_size: int = Field(default=10)
    db_command_timeout: int = Field(default=30)

    # Cache backend
    cache_backend: CacheBackendType = Field(default=CacheBackendType.MEMORY)
    redis_url: Optional[str] = Field(default=None)
    cache_key_prefix: str = Field(default="customer_access")
    cache_max_entries: int = Field(default=10000)

    # TTLs in seconds
    relation_cache_ttl: int = Field(default=CacheTTL.RELATION)
    branch_cache_ttl: int = Field(default=CacheTTL.BRANCH)
    employee_cache_ttl: int = Field(default=CacheTTL.EMPLOYEE)
    customer_cache_ttl: int = Field(default=CacheTTL.CUSTOMER)
    invoice_cache_ttl: int = Field(default=CacheTTL.INVOICE)
    payment_cache_ttl: int = Field(default=CacheTTL.PAYMENT)
    membership_cache_ttl: int = Field(default=CacheTTL.MEMBERSHIP)

    # Access policy
    bypass_capabilities: List[str] = Field(default_factory=lambda: list(DEFAULT_BYPASS_CAPABILITIES))
    customer_roles: List[str] = Field(default_factory=lambda: [role.value for role in CustomerRole])
    agency_roles: List[str] = Field(default_factory=lambda: list(DEFAULT_AGENCY_ROLES))
    fail_closed_unknown_entities: bool = Field(
        default=False,
        description="Block instead of allow when an entity type has no relation config"
    )
    agency_plugin_active: bool = Field(default=False)

    @field_validator("table_prefix")
    @classmethod
    def validate_table_prefix(cls, value: str) -> str:
        """Table prefix is embedded in SQL, keep it to identifier characters."""
        if value and not value.replace("_", "").isalnum():
            raise ValueError(f"Invalid table prefix: {value!r}")
        return value

    @field_validator(
        "relation_cache_ttl",
        "branch_cache_ttl",
        "employee_cache_ttl",
        "customer_cache_ttl",
        "invoice_cache_ttl",
        "payment_cache_ttl",
        "membership_cache_ttl",
    )
    @classmethod
    def validate_ttl(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Cache TTL must be positive")
        return value

    def table(self, name: str) -> str:
        """Return the prefixed table name."""
        return f"{self.table_prefix}{name}"

    @property
    def uses_redis(self) -> bool:
        return self.cache_backend == CacheBackendType.REDIS


@lru_cache()
def get_settings() -> AccessSettings:
    """Get cached settings instance."""
    return AccessSettings()
