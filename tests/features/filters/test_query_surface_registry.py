"""Tests for QuerySurfaceRegistry."""

from typing import List, Optional, Sequence

import pytest

from customer_access.config.constants import DENY_ALL_PREDICATE, QuerySurfaces
from customer_access.core.exceptions import UnknownQuerySurfaceError
from customer_access.core.value_objects import UserId
from customer_access.features.filters.entities.request_context import RequestContext
from customer_access.features.filters.services.query_surface_registry import DEFAULT_SURFACES, QuerySurfaceRegistry

REQUEST = RequestContext(user_id=UserId(42))


class RecordingFilter:
    """Appends its own name so the call order is visible."""

    def __init__(self, name: str, surface: str = QuerySurfaces.CUSTOMERS, priority: int = 10):
        self.name = name
        self.surface = surface
        self.priority = priority

    async def apply(
        self,
        where_conditions: Sequence[str],
        request: RequestContext,
        table_alias: Optional[str] = None,
    ) -> List[str]:
        return list(where_conditions) + [self.name]


class FailingFilter(RecordingFilter):
    async def apply(self, where_conditions, request, table_alias=None):
        raise RuntimeError("predicate builder crashed")


class TestQuerySurfaceRegistry:
    """Test suite for surface subscriptions."""

    @pytest.fixture
    def registry(self):
        return QuerySurfaceRegistry()

    def test_default_surfaces_declared(self, registry):
        assert registry.surfaces() == list(DEFAULT_SURFACES)

    def test_register_on_undeclared_surface_raises(self, registry):
        with pytest.raises(UnknownQuerySurfaceError):
            registry.register(RecordingFilter("x", surface="inspections"))

    def test_declare_then_register(self, registry):
        access_filter = RecordingFilter("x", surface="inspections")

        registry.declare("inspections").register(access_filter)

        assert registry.filters_for("inspections") == [access_filter]

    @pytest.mark.asyncio
    async def test_filters_run_in_priority_order(self, registry):
        registry.register(RecordingFilter("late", priority=20))
        registry.register(RecordingFilter("first", priority=5))
        registry.register(RecordingFilter("early", priority=10))
        registry.register(RecordingFilter("early_second", priority=10))

        result = await registry.apply(QuerySurfaces.CUSTOMERS, ["base"], REQUEST)

        assert result == ["base", "first", "early", "early_second", "late"]

    @pytest.mark.asyncio
    async def test_priority_override_at_registration(self, registry):
        registry.register(RecordingFilter("a", priority=10))
        registry.register(RecordingFilter("b", priority=10), priority=1)

        assert await registry.apply(QuerySurfaces.CUSTOMERS, [], REQUEST) == ["b", "a"]

    @pytest.mark.asyncio
    async def test_surface_override_at_registration(self, registry):
        registry.register(RecordingFilter("a"), surface=QuerySurfaces.BRANCHES)

        assert await registry.apply(QuerySurfaces.BRANCHES, [], REQUEST) == ["a"]
        assert await registry.apply(QuerySurfaces.CUSTOMERS, [], REQUEST) == []

    @pytest.mark.asyncio
    async def test_undeclared_surface_denies(self, registry):
        assert await registry.apply("branches", ["base"], REQUEST) == ["base", DENY_ALL_PREDICATE]

    @pytest.mark.asyncio
    async def test_failing_filter_denies_and_later_filters_still_run(self, registry):
        registry.register(FailingFilter("broken", priority=1))
        registry.register(RecordingFilter("after", priority=2))

        result = await registry.apply(QuerySurfaces.CUSTOMERS, ["base"], REQUEST)

        assert result == ["base", DENY_ALL_PREDICATE, "after"]

    @pytest.mark.asyncio
    async def test_surface_without_filters(self, registry):
        conditions = ["base"]

        result = await registry.apply(QuerySurfaces.AGENCIES, conditions, REQUEST)

        assert result == ["base"]
        assert result is not conditions
