"""unitcache - package-loading cache and file view for code analysis servers."""

from unitcache.cache import File, PackageCache, View, to_uri
from unitcache.core.errors import LoadError, UnitCacheError, ViewError

__version__ = "0.1.0"

__all__ = [
    "File",
    "LoadError",
    "PackageCache",
    "UnitCacheError",
    "View",
    "ViewError",
    "to_uri",
]
