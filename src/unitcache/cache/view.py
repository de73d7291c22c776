"""Session-scoped file registry with overlay-aware parsing.

A :class:`View` hands out :class:`File` objects by URI and parses them on
request. Unsaved editor content (the loader config's ``overlay``) takes
precedence over the disk.

The loader only returns syntax trees, not the bytes they were parsed from,
so the view installs a parse hook that records every source handed to the
parser in a pending map. When a parsed file is registered, its content is
taken from that map and the entry is evicted.

Locking: ``_lock`` guards the URI -> File map and is held for map access
only. ``_pending_lock`` guards the pending map; the parse hook runs inside
the loader, so it must not depend on ``_lock``.
"""

from __future__ import annotations

import dataclasses
import os
import threading
from collections.abc import Callable

import structlog

from unitcache.cache.file import File
from unitcache.cache.uri import URI, normalize_uri, to_uri
from unitcache.core.errors import ViewError
from unitcache.loader.go import GoLoader
from unitcache.loader.models import LoadConfig, Loader, ParseFileFunc, SyntaxTree
from unitcache.loader.parser import GoParser

logger = structlog.get_logger()

GetLoadDir = Callable[[str], str]


class View:
    """File registry for one analysis session.

    Args:
        get_load_dir: Maps a filename to the working directory of its load.
            Defaults to the file's own directory.
        loader: Compiler used by :meth:`parse`. Defaults to :class:`GoLoader`.
        config: Base loader configuration; its ``overlay`` holds the
            session's unsaved edits.
        parse_source: Syntax parser behind the content-capturing hook.
    """

    def __init__(
        self,
        get_load_dir: GetLoadDir | None = None,
        *,
        loader: Loader | None = None,
        config: LoadConfig | None = None,
        parse_source: ParseFileFunc | None = None,
    ) -> None:
        self.config = config or LoadConfig()
        self._get_load_dir = get_load_dir or os.path.dirname
        self._loader = loader or GoLoader()
        self._parse_source = parse_source or GoParser().parse

        self._lock = threading.Lock()
        self._files: dict[URI, File] = {}

        self._pending_lock = threading.Lock()
        self._pending: dict[str, bytes] = {}

    def get_file(self, uri: str) -> File:
        """Return the File for ``uri``, registering an empty one if needed.

        Never parses.
        """
        key = normalize_uri(uri)
        with self._lock:
            return self._get_file(key)

    def _get_file(self, uri: URI) -> File:
        # Caller holds _lock.
        f = self._files.get(uri)
        if f is None:
            f = File(uri=uri, view=self)
            self._files[uri] = f
        return f

    def has_parsed(self, uri: str) -> bool:
        key = normalize_uri(uri)
        with self._lock:
            f = self._files.get(key)
        return f is not None and f.unit is not None

    def files(self) -> list[File]:
        with self._lock:
            return list(self._files.values())

    def pending_filenames(self) -> list[str]:
        """Files whose parsed content has not been claimed by a File yet.

        Dependency sources captured during :meth:`parse` stay here until their
        own File is parsed or their overlay changes. Nothing bounds the map,
        so it can grow over a long session.
        """
        with self._pending_lock:
            return sorted(self._pending)

    def _capture(self, filename: str, src: bytes | None) -> SyntaxTree:
        if src is not None:
            with self._pending_lock:
                self._pending[filename] = src
        return self._parse_source(filename, src)

    def parse(self, uri: str) -> None:
        """Load the units compiling ``uri`` and record every file they parsed.

        Raises:
            ViewError: If no filename or load directory can be derived from
                ``uri``, or if the load produced no units.
            Exception: Whatever the loader raised, unchanged.
        """
        filename = URI(uri).filename()
        load_dir = self._get_load_dir(filename)
        if not load_dir:
            raise ViewError.invalid_uri(uri, "no load directory")

        config = dataclasses.replace(self.config, dir=load_dir, parse_file=self._capture)
        logger.debug("view_parse", filename=filename, dir=load_dir)
        try:
            units = self._loader.load_file(config, filename)
        except Exception as e:
            logger.warning("view_parse_failed", filename=filename, error=str(e))
            raise
        if not units:
            raise ViewError.no_units(filename)

        # A file compiled into several units (e.g. a package and its test
        # variant) ends up pointing at the last unit in result order.
        for unit in units:
            for syntax in unit.syntax:
                if syntax is None:
                    continue
                with self._lock:
                    f = self._get_file(to_uri(syntax.filename))
                if f.content is None:
                    with self._pending_lock:
                        f.set_content(self._pending.pop(syntax.filename, None))
                f.token = syntax.token
                f.ast = syntax
                f.unit = unit

    def set_overlay(self, uri: str, content: bytes) -> None:
        """Record unsaved editor content for ``uri`` and drop its parse results."""
        self._update_overlay(uri, content)

    def clear_overlay(self, uri: str) -> None:
        """Forget unsaved editor content for ``uri``; the disk applies again."""
        self._update_overlay(uri, None)

    def _update_overlay(self, uri: str, content: bytes | None) -> None:
        key = normalize_uri(uri)
        filename = key.filename()
        with self._lock:
            # Copy on write: loads in flight keep the overlay they started with.
            overlay = dict(self.config.overlay)
            if content is None:
                overlay.pop(filename, None)
            else:
                overlay[filename] = content
            self.config = dataclasses.replace(self.config, overlay=overlay)
            f = self._get_file(key)
        with self._pending_lock:
            self._pending.pop(filename, None)
        f.reset()
