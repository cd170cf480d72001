"""Relation resolver.

Computes the access decision of one user for one entity type:

1. Platform administrators are ``Unrestricted`` for every entity type.
2. Entity types without a relation config are ``Unrestricted``
   (``Blocked`` when the resolver is built fail-closed). Configs with
   ``filter_enabled`` off are ``Unrestricted`` too.
3. Users that neither own nor work for any tenant are ``Unrestricted``;
   this resolver only restricts members of the customer hierarchy.
4. A cached decision for ``(entity_type, user_id)`` is returned as is.
5. Otherwise the bridge table yields the entity ids bridged to the user's
   tenants: none gives ``Blocked``, some give ``RestrictedTo``. The decision
   is cached with the config TTL.

Resolution never raises. Data-access failures give an uncached ``Blocked``.
"""

import logging

from ..entities.access_decision import (
    AccessDecision,
    BLOCKED,
    UNRESTRICTED,
    RestrictedTo,
)
from ..entities.protocols import BridgeRepository, BypassPolicy, TenantMembership
from .relation_cache import RelationCacheProvider
from .relation_registry import RelationConfigRegistry
from ....core.value_objects import UserId

logger = logging.getLogger(__name__)


class RelationResolver:
    """Resolves (entity type, user) pairs to access decisions."""

    def __init__(
        self,
        registry: RelationConfigRegistry,
        bridge_repository: BridgeRepository,
        membership: TenantMembership,
        cache_provider: RelationCacheProvider,
        bypass_policy: BypassPolicy,
        fail_closed_unknown_entities: bool = False,
    ):
        self.registry = registry
        self.bridge_repository = bridge_repository
        self.membership = membership
        self.cache_provider = cache_provider
        self.bypass_policy = bypass_policy
        self.fail_closed_unknown_entities = fail_closed_unknown_entities

    async def resolve(self, entity_type: str, user_id: UserId) -> AccessDecision:
        """Access decision of a user for an entity type."""
        if await self._is_bypassed(user_id):
            logger.debug(f"User {user_id} bypasses {entity_type} restrictions")
            return UNRESTRICTED

        config = self.registry.get(entity_type)
        if config is None:
            if self.fail_closed_unknown_entities:
                logger.warning(f"No relation config for '{entity_type}', blocking user {user_id}")
                return BLOCKED
            logger.debug(f"No relation config for '{entity_type}', user {user_id} unrestricted")
            return UNRESTRICTED

        if not config.filter_enabled:
            return UNRESTRICTED

        try:
            tenant_ids = await self.membership.get_tenant_ids(user_id)
        except Exception as e:
            logger.error(f"Failed to load tenants of user {user_id} for '{entity_type}': {e}")
            return BLOCKED

        if not tenant_ids:
            logger.debug(f"User {user_id} is not a customer member, '{entity_type}' unrestricted")
            return UNRESTRICTED

        cache = self.cache_provider.for_config(config)
        cached = await cache.get_decision(entity_type, user_id)
        if cached is not None:
            logger.debug(f"Cache hit for '{entity_type}' decision of user {user_id}")
            return cached

        try:
            entity_ids = await self.bridge_repository.fetch_entity_ids(config, tenant_ids)
        except Exception as e:
            logger.error(f"Failed to resolve '{entity_type}' for user {user_id}, blocking: {e}")
            return BLOCKED

        decision = RestrictedTo.of(entity_ids)
        await cache.set_decision(entity_type, user_id, decision, ttl=config.cache_ttl)
        logger.debug(f"Resolved '{entity_type}' for user {user_id}: {decision}")
        return decision

    async def can_access(self, entity_type: str, entity_id: int, user_id: UserId) -> bool:
        """Whether the user may see one entity row."""
        decision = await self.resolve(entity_type, user_id)
        return decision.permits(entity_id)

    async def _is_bypassed(self, user_id: UserId) -> bool:
        try:
            return await self.bypass_policy.is_unrestricted(user_id)
        except Exception as e:
            # Not an administrator as far as we can tell, keep resolving
            logger.error(f"Bypass check failed for user {user_id}: {e}")
            return False
