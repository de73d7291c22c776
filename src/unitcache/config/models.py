"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (UNITCACHE__SECTION__KEY)
3. Repo YAML (.unitcache/config.yaml)
4. Global YAML (~/.config/unitcache/config.yaml)
5. Built-in defaults (this file)

Examples:
    UNITCACHE__LOGGING__LEVEL=DEBUG
    UNITCACHE__LOADER__TESTS=false
    UNITCACHE__CACHE__COALESCE_REBUILDS=false
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:
    from unitcache.loader.models import LoadConfig

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        UNITCACHE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every cached package.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class LoaderSettings(BaseModel):
    """Settings handed to the loader on every load.

    Env vars:
        UNITCACHE__LOADER__TESTS: Compile test files as test variants
        UNITCACHE__LOADER__MAX_FILE_SIZE_MB: Skip sources larger than this
    """

    tests: bool = Field(
        default=True,
        description="Also load test variants of packages that have test files.",
    )
    excluded_dirs: list[str] = Field(
        default_factory=lambda: ["vendor", "testdata"],
        description="Directory names skipped by recursive loads. "
        "Names starting with '.' or '_' are always skipped.",
    )
    max_file_size_mb: int = Field(
        default=10,
        description="Skip sources larger than this (MB).",
    )

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_max_file_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"max_file_size_mb must be positive, got {v}")
        return v

    def to_load_config(self, directory: str = "") -> LoadConfig:
        """Build a fresh loader configuration rooted at ``directory``."""
        from unitcache.loader.models import LoadConfig

        return LoadConfig(
            dir=directory,
            tests=self.tests,
            excluded_dirs=frozenset(self.excluded_dirs),
            max_file_size=self.max_file_size_mb * 1024 * 1024,
        )


class CacheConfig(BaseModel):
    """Package cache configuration.

    Env vars:
        UNITCACHE__CACHE__ROOT: Root directory the package cache is built from
        UNITCACHE__CACHE__COALESCE_REBUILDS: Share one rebuild between concurrent misses
    """

    root: str | None = Field(
        default=None,
        description="Root directory whose recursive file set defines the cached graph.",
    )
    coalesce_rebuilds: bool = Field(
        default=True,
        description="Concurrent cache misses share one rebuild instead of each rebuilding.",
    )


class UnitCacheConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    loader: LoaderSettings = Field(default_factory=LoaderSettings)
    cache: CacheConfig = Field(default_factory=CacheConfig)
