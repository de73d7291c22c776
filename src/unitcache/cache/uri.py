"""File identities as ``file://`` URIs.

A :class:`URI` is the platform-independent identity of a source file in a
view: forward slashes, percent-encoded, drive letters lower-cased.
"""

from __future__ import annotations

import os
import posixpath
import re
import sys
from urllib.parse import quote, unquote, urlparse

from unitcache.core.errors import ViewError

FILE_SCHEME = "file"

_WINDOWS_PATH = re.compile(r"^([A-Za-z]):[\\/]")
_WINDOWS_URI_PATH = re.compile(r"^/([A-Za-z]):/")


class URI(str):
    """A ``file://`` URI naming one source file."""

    __slots__ = ()

    def filename(self) -> str:
        """The OS path named by this URI.

        Raises:
            ViewError: If the URI is not a usable ``file://`` URI.
        """
        parsed = urlparse(self)
        if parsed.scheme != FILE_SCHEME:
            raise ViewError.invalid_uri(self, f"unsupported scheme {parsed.scheme!r}")
        if parsed.netloc not in ("", "localhost"):
            raise ViewError.invalid_uri(self, f"unsupported host {parsed.netloc!r}")
        path = unquote(parsed.path)
        if not path:
            raise ViewError.invalid_uri(self, "empty path")
        if _WINDOWS_URI_PATH.match(path) and sys.platform == "win32":
            return path[1:].replace("/", "\\")
        return path


def to_uri(path: str | os.PathLike[str]) -> URI:
    """URI for a filesystem path; relative paths are made absolute first."""
    text = os.fspath(path)
    match = _WINDOWS_PATH.match(text)
    if match:
        text = match.group(1).lower() + text[1:]
        text = "/" + text.replace("\\", "/")
    else:
        if not posixpath.isabs(text):
            text = os.path.abspath(text)
        text = posixpath.normpath(text)
    return URI(f"{FILE_SCHEME}://{quote(text, safe='/:')}")


def normalize_uri(uri: str) -> URI:
    """Canonical form of ``uri``, or ``uri`` unchanged if it names no file."""
    try:
        return to_uri(URI(uri).filename())
    except ViewError:
        return URI(uri)
