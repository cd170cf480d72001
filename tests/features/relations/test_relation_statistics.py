"""Tests for RelationStatisticsService."""

from unittest.mock import AsyncMock

import pytest

from conftest import ADMIN_USER, OUTSIDER_USER, OWNER_USER, UNBRIDGED_EMPLOYEE_USER
from customer_access.core.exceptions import UnknownEntityTypeError


class TestRelationStatisticsService:
    """Test suite for relation counts."""

    @pytest.fixture
    def statistics(self, access):
        return access.statistics

    @pytest.fixture
    def second_customer_on_agency_10(self, hierarchy):
        hierarchy.tables["app_customer_branches"].append(
            {"id": 4, "customer_id": 6, "agency_id": 10, "division_id": None, "inspector_id": None}
        )

    @pytest.mark.asyncio
    async def test_counts_within_member_tenants(self, statistics, second_customer_on_agency_10):
        assert await statistics.get_tenant_count_for_entity("agency", 10, OWNER_USER) == 1
        assert await statistics.get_bridge_row_count_for_entity("agency", 10, OWNER_USER) == 1

    @pytest.mark.asyncio
    async def test_administrator_counts_everything(self, statistics, second_customer_on_agency_10):
        assert await statistics.get_tenant_count_for_entity("agency", 10, ADMIN_USER) == 2
        assert await statistics.get_bridge_row_count_for_entity("agency", 10, ADMIN_USER) == 2

    @pytest.mark.asyncio
    async def test_user_without_tenants_counts_zero(self, statistics):
        assert await statistics.get_tenant_count_for_entity("agency", 10, OUTSIDER_USER) == 0

    @pytest.mark.asyncio
    async def test_unrelated_entity_counts_zero(self, statistics):
        assert await statistics.get_tenant_count_for_entity("agency", 10, UNBRIDGED_EMPLOYEE_USER) == 0

    @pytest.mark.asyncio
    async def test_unknown_entity_type_raises(self, statistics):
        with pytest.raises(UnknownEntityTypeError):
            await statistics.get_tenant_count_for_entity("inspector", 7, OWNER_USER)

    @pytest.mark.asyncio
    async def test_counts_are_cached(self, statistics, hierarchy):
        assert await statistics.get_bridge_row_count_for_entity("agency", 10, OWNER_USER) == 1

        hierarchy.tables["app_customer_branches"].append(
            {"id": 4, "customer_id": 5, "agency_id": 10, "division_id": None, "inspector_id": None}
        )

        assert await statistics.get_bridge_row_count_for_entity("agency", 10, OWNER_USER) == 1

    @pytest.mark.asyncio
    async def test_branch_change_refreshes_counts(self, access, hierarchy):
        assert await access.statistics.get_bridge_row_count_for_entity("agency", 10, OWNER_USER) == 1

        hierarchy.tables["app_customer_branches"].append(
            {"id": 4, "customer_id": 5, "agency_id": 10, "division_id": None, "inspector_id": None}
        )
        await access.invalidation.branch_changed(branch_id=4, customer_id=5)

        assert await access.statistics.get_bridge_row_count_for_entity("agency", 10, OWNER_USER) == 2

    @pytest.mark.asyncio
    async def test_repository_failure_counts_zero(self, statistics, hierarchy):
        hierarchy.count_tenants_for_entity = AsyncMock(side_effect=ConnectionError("database unavailable"))

        assert await statistics.get_tenant_count_for_entity("agency", 10, OWNER_USER) == 0
