"""Configuration adapters."""

from communauto_finder.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
