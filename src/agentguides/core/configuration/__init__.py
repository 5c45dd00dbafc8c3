"""Configuration package: user preferences and project build settings."""

from __future__ import annotations

from functools import lru_cache

from .manager import ConfigManager
from .models import CLIConfig


@lru_cache(maxsize=1)
def get_config_manager() -> ConfigManager:
    return ConfigManager()


__all__ = ["CLIConfig", "ConfigManager", "get_config_manager"]
