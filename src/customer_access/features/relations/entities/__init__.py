"""Relation entities."""

from .access_decision import (
    AccessDecision,
    Unrestricted,
    Blocked,
    RestrictedTo,
    UNRESTRICTED,
    BLOCKED,
    decision_to_payload,
    decision_from_payload,
)
from .relation_config import RelationConfig
from .protocols import BridgeRepository, TenantMembership, BypassPolicy

__all__ = [
    "AccessDecision",
    "Unrestricted",
    "Blocked",
    "RestrictedTo",
    "UNRESTRICTED",
    "BLOCKED",
    "decision_to_payload",
    "decision_from_payload",
    "RelationConfig",
    "BridgeRepository",
    "TenantMembership",
    "BypassPolicy",
]
