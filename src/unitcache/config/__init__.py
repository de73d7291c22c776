"""Config module exports."""

from unitcache.config.loader import UnitCacheSettings, load_config
from unitcache.config.models import (
    CacheConfig,
    LoaderSettings,
    LoggingConfig,
    LogOutputConfig,
    UnitCacheConfig,
)

__all__ = [
    "load_config",
    "UnitCacheConfig",
    "UnitCacheSettings",
    "CacheConfig",
    "LoaderSettings",
    "LoggingConfig",
    "LogOutputConfig",
]
