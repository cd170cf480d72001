"""Relation services."""

from .relation_cache import RelationCacheManager, RelationCacheProvider
from .relation_registry import RelationConfigRegistry
from .relation_resolver import RelationResolver
from .relation_statistics import RelationStatisticsService

__all__ = [
    "RelationCacheManager",
    "RelationCacheProvider",
    "RelationConfigRegistry",
    "RelationResolver",
    "RelationStatisticsService",
]
