"""Loaders: the compiler behind the caches."""

from unitcache.loader.go import GoLoader, find_module
from unitcache.loader.models import (
    CompiledUnit,
    LoadConfig,
    Loader,
    ParseFileFunc,
    SyntaxTree,
    TokenFile,
)
from unitcache.loader.parser import GoParser

__all__ = [
    "CompiledUnit",
    "GoLoader",
    "GoParser",
    "LoadConfig",
    "Loader",
    "ParseFileFunc",
    "SyntaxTree",
    "TokenFile",
    "find_module",
]
