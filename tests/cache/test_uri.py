"""Tests for file URIs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from unitcache.cache.uri import URI, normalize_uri, to_uri
from unitcache.core.errors import ErrorCode, ViewError


class TestToUri:
    def test_posix_path(self) -> None:
        assert to_uri("/repo/a/a.go") == "file:///repo/a/a.go"

    def test_normalizes_dots(self) -> None:
        assert to_uri("/repo/a/../b/./b.go") == "file:///repo/b/b.go"

    def test_percent_encodes(self) -> None:
        assert to_uri("/my repo/a#1.go") == "file:///my%20repo/a%231.go"

    def test_windows_path(self) -> None:
        assert to_uri("C:\\Repo\\a.go") == "file:///c:/Repo/a.go"

    def test_relative_path_made_absolute(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        assert to_uri("a.go") == to_uri(tmp_path / "a.go")

    def test_returns_uri(self) -> None:
        assert isinstance(to_uri("/x.go"), URI)


class TestFilename:
    def test_round_trip(self) -> None:
        assert to_uri("/my repo/a.go").filename() == "/my repo/a.go"

    def test_localhost(self) -> None:
        assert URI("file://localhost/repo/a.go").filename() == "/repo/a.go"

    @pytest.mark.skipif(sys.platform == "win32", reason="posix path form")
    def test_windows_uri_on_posix_keeps_slash(self) -> None:
        assert URI("file:///c:/Repo/a.go").filename() == "/c:/Repo/a.go"

    @pytest.mark.parametrize(
        "bad",
        ["http://example.com/a.go", "file://", "untitled:Untitled-1", "file://host/a.go"],
    )
    def test_malformed_uris_raise(self, bad: str) -> None:
        with pytest.raises(ViewError) as exc_info:
            URI(bad).filename()

        assert exc_info.value.code == ErrorCode.VIEW_INVALID_URI


class TestNormalizeUri:
    def test_equivalent_spellings_collapse(self) -> None:
        assert normalize_uri("file:///repo/a/../a/x.go") == "file:///repo/a/x.go"
        assert normalize_uri("file://localhost/repo/x.go") == "file:///repo/x.go"

    def test_malformed_returned_unchanged(self) -> None:
        assert normalize_uri("untitled:Untitled-1") == "untitled:Untitled-1"
