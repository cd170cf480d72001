"""Constants and enums for customer-access.

Cache groups, key types, TTLs, role slugs and query surface names shared by
the resolver, the cache managers and the access filter adapters. Table names
are given without the installation prefix.
"""

from enum import Enum
from typing import Final, Tuple


HOUR_IN_SECONDS: Final[int] = 3600


class CacheGroups:
    """Cache group namespaces, one per entity cache."""

    CUSTOMER: Final[str] = "wp_customer"
    BRANCH: Final[str] = "wp_customer_branch"
    EMPLOYEE: Final[str] = "wp_customer_employee"
    INVOICE: Final[str] = "wp_customer_invoice"
    PAYMENT: Final[str] = "wp_customer_payment"
    MEMBERSHIP_FEATURES: Final[str] = "wp_customer_membership_features"
    MEMBERSHIP_GROUPS: Final[str] = "wp_customer_membership_groups"
    ENTITY_RELATIONS: Final[str] = "wp_customer_entity_relations"
    AGENCY_RELATIONS: Final[str] = "wp_customer_agency_relations"


class CacheTTL:
    """Cache TTL values in seconds."""

    RELATION: Final[int] = 1 * HOUR_IN_SECONDS
    BRANCH: Final[int] = 2 * HOUR_IN_SECONDS
    EMPLOYEE: Final[int] = 2 * HOUR_IN_SECONDS
    INVOICE: Final[int] = 6 * HOUR_IN_SECONDS
    PAYMENT: Final[int] = 6 * HOUR_IN_SECONDS
    CUSTOMER: Final[int] = 12 * HOUR_IN_SECONDS
    MEMBERSHIP: Final[int] = 12 * HOUR_IN_SECONDS


class CacheKeyTypes:
    """Key types shared by every entity cache manager."""

    DATATABLE: Final[str] = "datatable"
    ACCESSIBLE_IDS: Final[str] = "accessible_ids"
    RELATION_COUNT: Final[str] = "count"
    RELATION_BRANCH_COUNT: Final[str] = "branch_count"


class Tables:
    """Hierarchy tables (unprefixed)."""

    CUSTOMERS: Final[str] = "app_customers"
    BRANCHES: Final[str] = "app_customer_branches"
    EMPLOYEES: Final[str] = "app_customer_employees"
    AGENCIES: Final[str] = "app_agencies"
    AGENCY_EMPLOYEES: Final[str] = "app_agency_employees"
    AGENCY_DIVISIONS: Final[str] = "app_agency_divisions"


class EntityTypes:
    """Entity types with a relation config shipped by this package."""

    CUSTOMER: Final[str] = "customer"
    BRANCH: Final[str] = "branch"
    COMPANY: Final[str] = "company"
    AGENCY: Final[str] = "agency"


class QuerySurfaces:
    """Names of the consuming list queries adapters subscribe to."""

    CUSTOMERS: Final[str] = "customers"
    BRANCHES: Final[str] = "customer_branches"
    COMPANIES: Final[str] = "companies"
    AGENCIES: Final[str] = "agencies"
    AGENCY_EMPLOYEES: Final[str] = "agency_employees"


class CustomerRole(str, Enum):
    """Roles owned by the customer plugin."""

    CUSTOMER = "customer"
    CUSTOMER_ADMIN = "customer_admin"
    CUSTOMER_BRANCH_ADMIN = "customer_branch_admin"
    CUSTOMER_EMPLOYEE = "customer_employee"


DEFAULT_AGENCY_ROLES: Final[Tuple[str, ...]] = (
    "agency",
    "agency_employee",
    "agency_admin_dinas",
    "agency_admin_unit",
    "agency_admin_provinsi",
    "agency_division_admin",
    "agency_inspector",
    "agency_pengawas",
    "agency_pengawas_spesialis",
    "agency_kepala_unit",
    "agency_kepala_seksi",
    "agency_kepala_bidang",
    "agency_kepala_dinas",
)

DEFAULT_BYPASS_CAPABILITIES: Final[Tuple[str, ...]] = (
    "manage_options",
    "admin_platform",
)

# Always-false predicate appended for a blocked caller.
DENY_ALL_PREDICATE: Final[str] = "1=0"
