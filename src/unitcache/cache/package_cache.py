"""Root-scoped cache of compiled units.

Units are keyed by the normalized directory of their first compiled file.
A miss rebuilds the whole cache from the root: the cache is cleared, every
unit under the root is loaded, and each one is cached together with all
of its transitive dependencies. Insertion is first-write-wins.

There is no partial invalidation. A failed rebuild leaves the cache empty,
so the next call retries from scratch instead of serving partial state.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

import structlog

from unitcache.cache.keys import cache_key_from_dir, cache_key_from_file, load_dir
from unitcache.cache.rwlock import RWLock
from unitcache.config.models import CacheConfig, LoaderSettings, UnitCacheConfig
from unitcache.loader.go import GoLoader
from unitcache.loader.models import CompiledUnit, Loader

logger = structlog.get_logger()


class PackageCache:
    """Compiled units reachable from one root directory.

    Construct one per root and pass it to the request handlers that need
    it.

    Usage::

        cache = PackageCache()
        cache.init("/repo")
        unit = cache.load("/repo/internal/a")
        unit = cache.lookup("example.com/repo/internal/a")
    """

    def __init__(
        self,
        loader: Loader | None = None,
        *,
        settings: LoaderSettings | None = None,
        config: CacheConfig | None = None,
        platform: str | None = None,
    ) -> None:
        self._loader = loader or GoLoader()
        self._settings = settings or LoaderSettings()
        self._coalesce = (config or CacheConfig()).coalesce_rebuilds
        self._platform = platform

        self._lock = RWLock()
        self._pool: dict[str, CompiledUnit] = {}
        self._root = ""
        # Bumped by every successful rebuild (under the write lock); lets a misser tell
        # whether someone else rebuilt while it waited.
        self._generation = 0

    @classmethod
    def from_config(cls, config: UnitCacheConfig, loader: Loader | None = None) -> PackageCache:
        """Cache configured from ``config``, built now if a root is set."""
        cache = cls(loader, settings=config.loader, config=config.cache)
        if config.cache.root:
            cache.init(config.cache.root)
        return cache

    @property
    def root(self) -> str:
        return self._root

    def init(self, root: str) -> None:
        """Set the root directory and build the cache.

        Raises:
            Exception: Whatever the loader raised; the cache is left empty.
        """
        self._root = root
        self._rebuild()

    def invalidate(self) -> None:
        """Drop everything and rebuild from the root."""
        self._rebuild()

    def load(self, directory: str) -> CompiledUnit | None:
        """Cached unit for ``directory``, rebuilding once on a miss.

        Returns None when the directory is not reachable from the root.
        """
        key = cache_key_from_dir(load_dir(directory, self._platform), self._platform)

        with self._lock.read_locked():
            unit = self._pool.get(key)
            generation = self._generation
        if unit is not None:
            return unit

        logger.info("package_cache_miss", key=key)
        self._rebuild(seen_generation=generation if self._coalesce else None)

        with self._lock.read_locked():
            return self._pool.get(key)

    def lookup(self, pkg_path: str) -> CompiledUnit | None:
        """First cached unit whose import path is ``pkg_path``."""
        with self._lock.read_locked():
            for unit in self._pool.values():
                if unit.pkg_path == pkg_path:
                    return unit
        return None

    def iterate(self, visit: Callable[[CompiledUnit], None]) -> None:
        """Call ``visit`` on every cached unit; the first exception propagates."""
        with self._lock.read_locked():
            for unit in self._pool.values():
                visit(unit)

    def push(self, units: Iterable[CompiledUnit]) -> None:
        """Cache externally loaded units and their dependencies."""
        with self._lock.write_locked():
            self._push(units)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._pool)

    def __contains__(self, directory: object) -> bool:
        if not isinstance(directory, str):
            return False
        key = cache_key_from_dir(load_dir(directory, self._platform), self._platform)
        with self._lock.read_locked():
            return key in self._pool

    def _rebuild(self, seen_generation: int | None = None) -> None:
        with self._lock.write_locked():
            if seen_generation is not None and self._generation != seen_generation:
                logger.debug("package_cache_rebuild_coalesced", root=self._root)
                return

            self._pool = {}

            root = load_dir(self._root, self._platform)
            logger.info("package_cache_rebuild", root=self._root, load_dir=root)
            config = self._settings.to_load_config(root)
            try:
                units = self._loader.load_tree(config, root)
            except Exception as e:
                logger.warning("package_cache_rebuild_failed", root=self._root, error=str(e))
                raise
            self._push(units)
            # Only a completed rebuild counts; missers queued behind a failed
            # one rebuild themselves.
            self._generation += 1
            logger.info("package_cache_rebuilt", root=self._root, packages=len(self._pool))

    def _push(self, units: Iterable[CompiledUnit]) -> None:
        # Caller holds the write lock.
        for unit in units:
            self._cache(unit)

    def _cache(self, unit: CompiledUnit) -> None:
        stack = [unit]
        while stack:
            current = stack.pop()
            if not current.compiled_go_files:
                continue
            key = cache_key_from_file(current.compiled_go_files[0], self._platform)
            if key in self._pool:
                continue
            self._pool[key] = current
            logger.debug("package_cached", key=key, pkg_path=current.pkg_path)
            stack.extend(reversed(list(current.imports.values())))
