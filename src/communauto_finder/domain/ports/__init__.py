"""Ports (interfaces) for the ports-and-adapters architecture."""

from communauto_finder.domain.ports.availability_fetcher import AvailabilityFetcher

__all__ = ["AvailabilityFetcher"]
