"""Reservauto API adapter for Communauto availability."""

from communauto_finder.adapters.reservauto_api.http_client import ReservautoHttpClient

__all__ = ["ReservautoHttpClient"]
