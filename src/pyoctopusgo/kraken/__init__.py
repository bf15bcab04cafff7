"""Octopus Energy Kraken GraphQL API access."""

from .auth import TokenManager
from .dispatches import SlotFetcher

__all__ = ["SlotFetcher", "TokenManager"]
