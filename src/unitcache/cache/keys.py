"""Cache keys for compiled units.

Windows reports the same directory with differing drive-letter case and
separator style across calls, so keys there are normalized to a lower-case
drive letter and forward slashes. Elsewhere a directory is its own key.

``platform`` defaults to ``sys.platform``; pass ``"win32"`` to apply the
Windows rules on any host.
"""

from __future__ import annotations

import ntpath
import posixpath
import sys

WINDOWS = "win32"


def _is_windows(platform: str | None) -> bool:
    return (platform or sys.platform) == WINDOWS


def load_dir(directory: str, platform: str | None = None) -> str:
    """Directory as handed to the loader.

    URI-derived Windows paths look like ``/C:/repo``; the leading slash is
    dropped there.
    """
    if not _is_windows(platform):
        return directory
    if directory.startswith("/"):
        return directory[1:]
    return directory


def cache_key_from_dir(directory: str, platform: str | None = None) -> str:
    if not _is_windows(platform):
        return directory

    drive, sep, rest = directory.partition(":")
    if sep:
        directory = f"{drive.lower()}:{rest}"
    return directory.replace("\\", "/")


def cache_key_from_file(filename: str, platform: str | None = None) -> str:
    dirname = ntpath.dirname if _is_windows(platform) else posixpath.dirname
    return cache_key_from_dir(dirname(filename), platform)
