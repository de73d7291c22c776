"""Tests for cache key normalization."""

from __future__ import annotations

import pytest

from unitcache.cache.keys import cache_key_from_dir, cache_key_from_file, load_dir

WIN = "win32"
LINUX = "linux"


class TestCacheKeyFromDir:
    @pytest.mark.parametrize(
        ("a", "b"),
        [
            ("C:\\Repo\\a", "c:/Repo/a"),
            ("C:/Repo/a", "c:\\Repo\\a"),
            ("D:\\x", "d:/x"),
        ],
    )
    def test_windows_spellings_share_a_key(self, a: str, b: str) -> None:
        """Drive-letter case and separator style do not fragment the cache."""
        assert cache_key_from_dir(a, WIN) == cache_key_from_dir(b, WIN)

    def test_windows_key_form(self) -> None:
        assert cache_key_from_dir("C:\\Repo\\Sub", WIN) == "c:/Repo/Sub"

    def test_windows_keeps_directory_case(self) -> None:
        """Only the drive letter is folded."""
        assert cache_key_from_dir("c:/Repo", WIN) != cache_key_from_dir("c:/repo", WIN)

    def test_windows_path_without_drive(self) -> None:
        assert cache_key_from_dir("\\\\server\\share", WIN) == "//server/share"

    @pytest.mark.parametrize("directory", ["/repo/a", "C:\\Repo", "/Repo/B\\c", ""])
    def test_identity_elsewhere(self, directory: str) -> None:
        assert cache_key_from_dir(directory, LINUX) == directory


class TestCacheKeyFromFile:
    def test_posix(self) -> None:
        assert cache_key_from_file("/repo/a/a.go", LINUX) == "/repo/a"

    def test_windows(self) -> None:
        assert cache_key_from_file("C:\\Repo\\a\\a.go", WIN) == "c:/Repo/a"

    def test_file_and_dir_keys_agree(self) -> None:
        """A unit cached from its file is found by its directory."""
        assert cache_key_from_file("C:\\Repo\\a\\a.go", WIN) == cache_key_from_dir(
            "C:/Repo/a", WIN
        )


class TestLoadDir:
    def test_windows_strips_leading_slash(self) -> None:
        assert load_dir("/C:/Repo", WIN) == "C:/Repo"

    def test_windows_keeps_plain_path(self) -> None:
        assert load_dir("C:/Repo", WIN) == "C:/Repo"

    def test_identity_elsewhere(self) -> None:
        assert load_dir("/repo", LINUX) == "/repo"
