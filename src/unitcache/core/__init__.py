"""Core module exports."""

from unitcache.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    LoadError,
    UnitCacheError,
    ViewError,
)
from unitcache.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Errors
    "UnitCacheError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "LoadError",
    "ViewError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
