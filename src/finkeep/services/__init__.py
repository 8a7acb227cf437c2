"""Clients for external services."""

from finkeep.services.location import LocationClient

__all__ = ["LocationClient"]
