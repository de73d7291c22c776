"""File view and package cache."""

from unitcache.cache.file import File
from unitcache.cache.keys import cache_key_from_dir, cache_key_from_file, load_dir
from unitcache.cache.package_cache import PackageCache
from unitcache.cache.rwlock import RWLock
from unitcache.cache.uri import URI, normalize_uri, to_uri
from unitcache.cache.view import GetLoadDir, View

__all__ = [
    "File",
    "GetLoadDir",
    "PackageCache",
    "RWLock",
    "URI",
    "View",
    "cache_key_from_dir",
    "cache_key_from_file",
    "load_dir",
    "normalize_uri",
    "to_uri",
]
