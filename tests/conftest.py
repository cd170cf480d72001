"""Pytest configuration and fixtures for customer-access tests.

The in-memory hierarchy:

- customer 5, owned by user 50 (customer admin)
    - branch 1: agency 10, division 100
    - branch 2: agency 20, division 200
    - employee 1001: user 42 at branch 1
- customer 6, owned by user 60
    - branch 3: no agency
    - employee 1002: user 61 at branch 3
- user 1: platform administrator
- user 70: owner of agency 10 (province 31)
- user 71: employee of agency 20 (province 32)
- user 72: agency role without an agency
- user 99: no roles, no membership
"""

import logging
from typing import Dict, List, Optional, Sequence
from unittest.mock import AsyncMock

import pytest

from customer_access.config.settings import AccessSettings
from customer_access.core.value_objects import UserId
from customer_access.features.cache.adapters.memory_adapter import MemoryCacheBackend
from customer_access.features.hierarchy.entities.hierarchy import BranchBridge, EmployeeContext
from customer_access.features.hierarchy.repositories.user_directory import InMemoryUserDirectory
from customer_access.features.relations.entities.relation_config import RelationConfig
from customer_access.integrations.bootstrap import AccessControlBuilder


ADMIN_USER = UserId(1)
EMPLOYEE_USER = UserId(42)
OWNER_USER = UserId(50)
OTHER_OWNER_USER = UserId(60)
UNBRIDGED_EMPLOYEE_USER = UserId(61)
AGENCY_OWNER_USER = UserId(70)
AGENCY_EMPLOYEE_USER = UserId(71)
AGENCY_WITHOUT_AGENCY_USER = UserId(72)
OUTSIDER_USER = UserId(99)


class InMemoryHierarchy:
    """Hierarchy probe and bridge repository over plain row dicts."""

    def __init__(self):
        self.tables: Dict[str, List[dict]] = {
            "app_customers": [
                {"id": 5, "user_id": 50},
                {"id": 6, "user_id": 60},
            ],
            "app_customer_branches": [
                {"id": 1, "customer_id": 5, "agency_id": 10, "division_id": 100, "inspector_id": None},
                {"id": 2, "customer_id": 5, "agency_id": 20, "division_id": 200, "inspector_id": 7},
                {"id": 3, "customer_id": 6, "agency_id": None, "division_id": None, "inspector_id": None},
            ],
            "app_customer_employees": [
                {"id": 1001, "user_id": 42, "customer_id": 5, "branch_id": 1},
                {"id": 1002, "user_id": 61, "customer_id": 6, "branch_id": 3},
            ],
        }
        self.bridge_queries = 0
        self.fail_bridge = False
        self.fail_membership = False

    # HierarchyProbe

    async def get_employee_context(self, user_id: UserId) -> Optional[EmployeeContext]:
        for employee in self.tables["app_customer_employees"]:
            if employee["user_id"] == int(user_id):
                branch = self._branch_row(employee["branch_id"]) or {}
                return EmployeeContext(
                    employee_id=employee["id"],
                    user_id=employee["user_id"],
                    customer_id=employee["customer_id"],
                    branch_id=employee["branch_id"],
                    agency_id=branch.get("agency_id"),
                    division_id=branch.get("division_id"),
                    inspector_id=branch.get("inspector_id"),
                )
        return None

    async def get_owned_customer_ids(self, user_id: UserId) -> List[int]:
        return sorted(row["id"] for row in self.tables["app_customers"] if row["user_id"] == int(user_id))

    async def get_tenant_ids(self, user_id: UserId) -> List[int]:
        if self.fail_membership:
            raise ConnectionError("database unavailable")
        employed = {row["customer_id"] for row in self.tables["app_customer_employees"] if row["user_id"] == int(user_id)}
        owned = set(await self.get_owned_customer_ids(user_id))
        return sorted(employed | owned)

    async def get_branch(self, branch_id: int) -> Optional[BranchBridge]:
        row = self._branch_row(branch_id)
        if row is None:
            return None
        return BranchBridge(
            branch_id=row["id"],
            customer_id=row["customer_id"],
            agency_id=row["agency_id"],
            division_id=row["division_id"],
            inspector_id=row["inspector_id"],
        )

    # BridgeRepository

    async def fetch_entity_ids(self, config: RelationConfig, tenant_ids: Sequence[int]) -> List[int]:
        self.bridge_queries += 1
        if self.fail_bridge:
            raise ConnectionError("database unavailable")
        return sorted({
            row[config.entity_column]
            for row in self.tables.get(config.bridge_table, [])
            if row[config.tenant_column] in set(tenant_ids) and row[config.entity_column] is not None
        })

    async def count_tenants_for_entity(self, config, entity_id, tenant_ids=None) -> int:
        return len({row[config.tenant_column] for row in self._bridge_rows(config, entity_id, tenant_ids)})

    async def count_bridge_rows_for_entity(self, config, entity_id, tenant_ids=None) -> int:
        return len(self._bridge_rows(config, entity_id, tenant_ids))

    def _bridge_rows(self, config, entity_id, tenant_ids):
        return [
            row for row in self.tables.get(config.bridge_table, [])
            if row[config.entity_column] == entity_id
            and (tenant_ids is None or row[config.tenant_column] in set(tenant_ids))
        ]

    def _branch_row(self, branch_id) -> Optional[dict]:
        for row in self.tables["app_customer_branches"]:
            if row["id"] == branch_id:
                return row
        return None


class InMemoryAgencyDirectory:
    """Agency plugin stand-in."""

    def __init__(self, available: bool = True):
        self.available = available
        self.agency_owners = {70: 10}
        self.agency_employees = {71: 20}
        self.provinces = {10: 31, 20: 32}
        self.divisions = {100: 10, 200: 20}

    @property
    def is_available(self) -> bool:
        return self.available

    async def get_user_agency_id(self, user_id: UserId) -> Optional[int]:
        return self.agency_owners.get(int(user_id), self.agency_employees.get(int(user_id)))

    async def get_agency_province_id(self, agency_id: int) -> Optional[int]:
        return self.provinces.get(agency_id)

    async def get_division_agency_id(self, division_id: int) -> Optional[int]:
        return self.divisions.get(division_id)


def build_user_directory() -> InMemoryUserDirectory:
    directory = InMemoryUserDirectory()
    directory.set_user(1, roles=["administrator"], capabilities=["admin_platform"])
    directory.set_user(42, roles=["customer_employee"])
    directory.set_user(50, roles=["customer", "customer_admin"])
    directory.set_user(60, roles=["customer"])
    directory.set_user(61, roles=["customer_employee"])
    directory.set_user(70, roles=["agency"])
    directory.set_user(71, roles=["agency_employee"])
    directory.set_user(72, roles=["agency"])
    return directory


@pytest.fixture
def package_caplog(caplog):
    """caplog wired to the package logger, which does not propagate."""
    package_logger = logging.getLogger("customer_access")
    package_logger.addHandler(caplog.handler)
    caplog.set_level(logging.INFO, logger="customer_access")
    yield caplog
    package_logger.removeHandler(caplog.handler)


@pytest.fixture
def settings():
    """Settings independent of the environment."""
    return AccessSettings(_env_file=None, agency_plugin_active=True)


@pytest.fixture
def hierarchy():
    return InMemoryHierarchy()


@pytest.fixture
def agency_directory():
    return InMemoryAgencyDirectory()


@pytest.fixture
def user_directory():
    return build_user_directory()


@pytest.fixture
def memory_backend():
    return MemoryCacheBackend()


@pytest.fixture
def pattern_backend():
    """Memory backend that advertises wildcard deletion."""
    return MemoryCacheBackend(supports_pattern_delete=True)


@pytest.fixture
def access(settings, hierarchy, agency_directory, user_directory, memory_backend):
    """Fully wired access control over the in-memory hierarchy."""
    return (
        AccessControlBuilder(settings)
        .with_hierarchy_probe(hierarchy)
        .with_bridge_repository(hierarchy)
        .with_agency_directory(agency_directory)
        .with_user_directory(user_directory)
        .with_cache_backend(memory_backend)
        .build()
    )


@pytest.fixture
def mock_database():
    """Mock asyncpg-style database."""
    mock_db = AsyncMock()
    mock_db.fetch = AsyncMock(return_value=[])
    mock_db.fetchrow = AsyncMock(return_value=None)
    mock_db.fetchval = AsyncMock(return_value=None)
    return mock_db


@pytest.fixture
def failing_backend():
    """Cache backend whose every call fails."""
    backend = AsyncMock()
    backend.supports_pattern_delete = False
    for method in ("get", "set", "delete", "expire", "delete_pattern"):
        getattr(backend, method).side_effect = ConnectionError("cache down")
    return backend
