"""Tests for the access filter adapters wired by the composition root."""

from unittest.mock import AsyncMock

import pytest

from conftest import (
    ADMIN_USER,
    AGENCY_EMPLOYEE_USER,
    AGENCY_OWNER_USER,
    AGENCY_WITHOUT_AGENCY_USER,
    EMPLOYEE_USER,
    OUTSIDER_USER,
    OWNER_USER,
    UNBRIDGED_EMPLOYEE_USER,
    InMemoryAgencyDirectory,
)
from customer_access.config.constants import DENY_ALL_PREDICATE, QuerySurfaces
from customer_access.features.filters.adapters import (
    AgencyAccessFilter,
    AgencyCompanyFilter,
    AgencyEmployeeFilter,
    BranchAccessFilter,
)
from customer_access.features.filters.entities.request_context import RequestContext
from customer_access.integrations.bootstrap import AccessControlBuilder

BASE_CONDITIONS = ["a.status = 'active'"]


def request_for(user_id) -> RequestContext:
    return RequestContext(user_id=user_id)


class TestAgencyAccessFilter:
    """Agencies list."""

    @pytest.fixture
    def access_filter(self, access):
        return next(f for f in access.surfaces.filters_for(QuerySurfaces.AGENCIES) if isinstance(f, AgencyAccessFilter))

    @pytest.mark.asyncio
    async def test_division_scoped_employee_sees_own_agency(self, access_filter):
        result = await access_filter.apply(BASE_CONDITIONS, request_for(EMPLOYEE_USER))

        assert result == BASE_CONDITIONS + ["a.id IN (10)"]

    @pytest.mark.asyncio
    async def test_tenant_wide_owner_sees_every_bridged_agency(self, access_filter):
        result = await access_filter.apply(BASE_CONDITIONS, request_for(OWNER_USER))

        assert result == BASE_CONDITIONS + ["a.id IN (10,20)"]

    @pytest.mark.asyncio
    async def test_member_without_bridged_agency_is_denied(self, access_filter):
        result = await access_filter.apply([], request_for(UNBRIDGED_EMPLOYEE_USER))

        assert result == [DENY_ALL_PREDICATE]

    @pytest.mark.asyncio
    async def test_administrator_is_not_filtered(self, access_filter):
        assert await access_filter.apply(BASE_CONDITIONS, request_for(ADMIN_USER)) == BASE_CONDITIONS

    @pytest.mark.asyncio
    async def test_non_member_is_not_filtered(self, access_filter):
        assert await access_filter.apply(BASE_CONDITIONS, request_for(OUTSIDER_USER)) == BASE_CONDITIONS

    @pytest.mark.asyncio
    async def test_applying_twice_adds_predicate_once(self, access_filter):
        once = await access_filter.apply(BASE_CONDITIONS, request_for(EMPLOYEE_USER))
        twice = await access_filter.apply(once, request_for(EMPLOYEE_USER))

        assert twice == once

    @pytest.mark.asyncio
    async def test_input_is_not_mutated(self, access_filter):
        conditions = list(BASE_CONDITIONS)

        await access_filter.apply(conditions, request_for(EMPLOYEE_USER))

        assert conditions == BASE_CONDITIONS

    @pytest.mark.asyncio
    async def test_custom_alias(self, access_filter):
        result = await access_filter.apply([], request_for(EMPLOYEE_USER), table_alias="agency")

        assert result == ["agency.id IN (10)"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("alias", ["a; DROP TABLE wp_users", "a.id", "1a", "a b"])
    async def test_invalid_alias_is_denied(self, access_filter, alias):
        result = await access_filter.apply(BASE_CONDITIONS, request_for(EMPLOYEE_USER), table_alias=alias)

        assert result == BASE_CONDITIONS + [DENY_ALL_PREDICATE]

    @pytest.mark.asyncio
    async def test_failure_while_building_is_denied(self, access_filter, hierarchy):
        hierarchy.get_owned_customer_ids = AsyncMock(side_effect=ConnectionError("database unavailable"))

        result = await access_filter.apply(BASE_CONDITIONS, request_for(EMPLOYEE_USER))

        assert result == BASE_CONDITIONS + [DENY_ALL_PREDICATE]


class TestAgencyEmployeeFilter:
    """Agency employees list."""

    @pytest.fixture
    def access_filter(self, access):
        return access.surfaces.filters_for(QuerySurfaces.AGENCY_EMPLOYEES)[0]

    def test_is_agency_employee_filter(self, access_filter):
        assert isinstance(access_filter, AgencyEmployeeFilter)

    @pytest.mark.asyncio
    async def test_division_scoped_employee(self, access_filter):
        result = await access_filter.apply([], request_for(EMPLOYEE_USER))

        assert result == ["(e.division_id = 100 AND e.agency_id = 10)"]

    @pytest.mark.asyncio
    async def test_division_without_agency_is_denied(self, access_filter, agency_directory):
        agency_directory.divisions.pop(100)

        result = await access_filter.apply([], request_for(EMPLOYEE_USER))

        assert result == [f"(e.division_id = 100 AND {DENY_ALL_PREDICATE})"]

    @pytest.mark.asyncio
    async def test_tenant_wide_owner(self, access_filter):
        result = await access_filter.apply([], request_for(OWNER_USER))

        assert result == ["e.agency_id IN (10,20)"]


class TestCustomerSurfaces:
    """Customers, branches and companies lists."""

    @pytest.mark.asyncio
    async def test_customers_for_customer_member(self, access):
        result = await access.surfaces.apply(QuerySurfaces.CUSTOMERS, [], request_for(EMPLOYEE_USER))

        assert result == ["c.id IN (5)"]

    @pytest.mark.asyncio
    async def test_customers_for_agency_user(self, access):
        result = await access.surfaces.apply(QuerySurfaces.CUSTOMERS, [], request_for(AGENCY_OWNER_USER))

        assert result == [
            "c.id IN (SELECT DISTINCT br.customer_id FROM wp_app_customer_branches br WHERE br.agency_id = 10)"
        ]

    @pytest.mark.asyncio
    async def test_customers_for_agency_employee(self, access):
        result = await access.surfaces.apply(QuerySurfaces.CUSTOMERS, [], request_for(AGENCY_EMPLOYEE_USER))

        assert result == [
            "c.id IN (SELECT DISTINCT br.customer_id FROM wp_app_customer_branches br WHERE br.agency_id = 20)"
        ]

    @pytest.mark.asyncio
    async def test_customers_for_agency_user_without_agency(self, access):
        result = await access.surfaces.apply(QuerySurfaces.CUSTOMERS, [], request_for(AGENCY_WITHOUT_AGENCY_USER))

        assert result == [DENY_ALL_PREDICATE]

    @pytest.mark.asyncio
    async def test_customers_for_user_without_roles(self, access):
        assert await access.surfaces.apply(QuerySurfaces.CUSTOMERS, [], request_for(OUTSIDER_USER)) == []

    @pytest.mark.asyncio
    async def test_branches_for_division_scoped_employee(self, access):
        result = await access.surfaces.apply(QuerySurfaces.BRANCHES, [], request_for(EMPLOYEE_USER))

        assert result == ["(b.customer_id = 5 AND b.division_id = 100)"]

    @pytest.mark.asyncio
    async def test_branches_for_owner(self, access):
        result = await access.surfaces.apply(QuerySurfaces.BRANCHES, [], request_for(OWNER_USER))

        assert result == ["b.id IN (1,2)"]

    @pytest.mark.asyncio
    async def test_companies_for_division_scoped_employee(self, access):
        result = await access.surfaces.apply(QuerySurfaces.COMPANIES, [], request_for(EMPLOYEE_USER))

        assert result == ["(cc.customer_id = 5 AND cc.division_id = 100)"]

    @pytest.mark.asyncio
    async def test_companies_for_agency_user(self, access):
        result = await access.surfaces.apply(QuerySurfaces.COMPANIES, [], request_for(AGENCY_OWNER_USER))

        assert result == ["cc.province_id = 31"]

    @pytest.mark.asyncio
    async def test_companies_for_agency_user_without_agency(self, access):
        result = await access.surfaces.apply(QuerySurfaces.COMPANIES, [], request_for(AGENCY_WITHOUT_AGENCY_USER))

        assert result == [DENY_ALL_PREDICATE]

    @pytest.mark.asyncio
    async def test_administrator_passes_every_surface(self, access):
        for surface in access.surfaces.surfaces():
            assert await access.surfaces.apply(surface, BASE_CONDITIONS, request_for(ADMIN_USER)) == BASE_CONDITIONS

    @pytest.mark.asyncio
    async def test_administrator_ignores_invalid_alias(self, access):
        result = await access.surfaces.apply(
            QuerySurfaces.BRANCHES, BASE_CONDITIONS, request_for(ADMIN_USER), table_alias="b; --"
        )

        assert result == BASE_CONDITIONS


class TestMissingAgencyPlugin:
    """Agency-dependent filters without the agency plugin."""

    @pytest.fixture
    def access(self, settings, hierarchy, user_directory, memory_backend):
        return (
            AccessControlBuilder(settings)
            .with_hierarchy_probe(hierarchy)
            .with_bridge_repository(hierarchy)
            .with_agency_directory(InMemoryAgencyDirectory(available=False))
            .with_user_directory(user_directory)
            .with_cache_backend(memory_backend)
            .build()
        )

    @pytest.mark.asyncio
    async def test_agency_surfaces_are_unchanged(self, access):
        for surface in (QuerySurfaces.AGENCIES, QuerySurfaces.AGENCY_EMPLOYEES):
            result = await access.surfaces.apply(surface, BASE_CONDITIONS, request_for(EMPLOYEE_USER))
            assert result == BASE_CONDITIONS

    @pytest.mark.asyncio
    async def test_agency_user_sees_unfiltered_companies(self, access):
        assert await access.surfaces.apply(QuerySurfaces.COMPANIES, [], request_for(AGENCY_OWNER_USER)) == []

    @pytest.mark.asyncio
    async def test_customer_filters_still_apply(self, access):
        result = await access.surfaces.apply(QuerySurfaces.BRANCHES, [], request_for(EMPLOYEE_USER))

        assert result == ["(b.customer_id = 5 AND b.division_id = 100)"]

    def test_agency_relation_not_registered(self, access):
        assert "agency" not in access.registry
        assert not access.agency_integration.is_available


class TestFilterMetadata:
    """Surfaces and priorities declared by the adapters."""

    def test_surfaces_and_priorities(self, access):
        branch_filter = access.surfaces.filters_for(QuerySurfaces.BRANCHES)[0]
        company_filters = access.surfaces.filters_for(QuerySurfaces.COMPANIES)

        assert isinstance(branch_filter, BranchAccessFilter)
        assert branch_filter.surface == QuerySurfaces.BRANCHES
        assert [f.priority for f in company_filters] == [10, 20]
        assert isinstance(company_filters[-1], AgencyCompanyFilter)
