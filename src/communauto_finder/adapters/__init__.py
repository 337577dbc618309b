"""Adapters layer - external system integrations."""

from communauto_finder.adapters.config import AppConfig
from communauto_finder.adapters.reservauto_api import ReservautoHttpClient

__all__ = [
    "AppConfig",
    "ReservautoHttpClient",
]
