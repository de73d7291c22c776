"""Tests for the readers-writer lock."""

from __future__ import annotations

import threading
import time

import pytest

from unitcache.cache.rwlock import RWLock
from unitcache.core.errors import ErrorCode, InternalError, LoadError


class TestRWLock:
    def test_readers_share(self) -> None:
        """Several readers hold the lock at once."""
        # Given
        lock = RWLock()
        inside = threading.Barrier(3, timeout=5)

        def reader() -> None:
            with lock.read_locked():
                inside.wait()

        # When
        threads = [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        # Then: the barrier only trips if all three were inside together
        assert not inside.broken

    def test_writer_excludes_readers(self) -> None:
        # Given
        lock = RWLock()
        events: list[str] = []
        lock.acquire_write()

        def reader() -> None:
            with lock.read_locked():
                events.append("read")

        t = threading.Thread(target=reader)
        t.start()
        time.sleep(0.05)

        # When
        events.append("write-done")
        lock.release_write()
        t.join(timeout=5)

        # Then
        assert events == ["write-done", "read"]

    def test_waiting_writer_blocks_new_readers(self) -> None:
        """Writer preference: a queued writer goes before later readers."""
        # Given
        lock = RWLock()
        events: list[str] = []
        lock.acquire_read()

        def writer() -> None:
            with lock.write_locked():
                events.append("write")

        def late_reader() -> None:
            with lock.read_locked():
                events.append("read")

        w = threading.Thread(target=writer)
        w.start()
        time.sleep(0.05)
        r = threading.Thread(target=late_reader)
        r.start()
        time.sleep(0.05)

        # When
        lock.release_read()
        w.join(timeout=5)
        r.join(timeout=5)

        # Then
        assert events == ["write", "read"]

    def test_release_without_acquire_is_an_error(self) -> None:
        lock = RWLock()

        with pytest.raises(InternalError):
            lock.release_read()
        with pytest.raises(InternalError):
            lock.release_write()

    def test_lock_released_on_exception(self) -> None:
        lock = RWLock()

        with pytest.raises(RuntimeError), lock.write_locked():
            raise RuntimeError("boom")

        with lock.read_locked():
            pass

    def test_given_load_error_inside_write_lock_when_raised_then_surfaces_unchanged(
        self,
    ) -> None:
        """Errors leave write_locked() with their own type."""
        # Given
        lock = RWLock()

        # When / Then
        with pytest.raises(LoadError) as exc_info, lock.write_locked():
            raise LoadError.failed("/repo", "go.mod: syntax error")
        assert exc_info.value.code == ErrorCode.LOAD_FAILED
