"""unitcache error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: View
- 4xxx: Load
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # View (3xxx)
    VIEW_INVALID_URI = 3001
    VIEW_NO_UNITS = 3002

    # Load (4xxx)
    LOAD_FAILED = 4001
    LOAD_NOT_FOUND = 4002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True)
class UnitCacheError(Exception):
    """Base error with structured context for request handlers."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'VIEW_NO_UNITS')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(UnitCacheError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config path not found: {path}",
            details={"path": path},
        )


class ViewError(UnitCacheError):
    """Errors raised while resolving or parsing files of a view."""

    @classmethod
    def invalid_uri(cls, uri: str, reason: str) -> "ViewError":
        return cls(
            code=ErrorCode.VIEW_INVALID_URI,
            message=f"Cannot derive a filename from {uri}: {reason}",
            details={"uri": uri, "reason": reason},
        )

    @classmethod
    def no_units(cls, filename: str) -> "ViewError":
        return cls(
            code=ErrorCode.VIEW_NO_UNITS,
            message=f"no packages found for {filename}",
            details={"filename": filename},
        )


class LoadError(UnitCacheError):
    """Errors reported by a loader while compiling units."""

    @classmethod
    def failed(cls, target: str, reason: str, *, retryable: bool = False) -> "LoadError":
        return cls(
            code=ErrorCode.LOAD_FAILED,
            message=f"Failed to load {target}: {reason}",
            retryable=retryable,
            details={"target": target, "reason": reason},
        )

    @classmethod
    def not_found(cls, path: str) -> "LoadError":
        return cls(
            code=ErrorCode.LOAD_NOT_FOUND,
            message=f"No such file or directory: {path}",
            details={"path": path},
        )


class InternalError(UnitCacheError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
