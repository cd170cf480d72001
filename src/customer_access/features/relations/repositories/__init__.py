"""Relation repositories."""

from .bridge_repository import AsyncPGBridgeRepository

__all__ = ["AsyncPGBridgeRepository"]
