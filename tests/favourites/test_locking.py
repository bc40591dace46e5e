"""Tests for the writer-preferring readers-writer lock."""

from __future__ import annotations

import threading
import time

import pytest

from favourites_api.services.favourites.locking import ReadWriteLock


def test_readers_share_the_lock() -> None:
    lock = ReadWriteLock()
    inside = threading.Barrier(3, timeout=2)

    def read() -> None:
        with lock.read():
            # All three readers must be inside at once to pass the barrier.
            inside.wait()

    threads = [threading.Thread(target=read) for _ in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert not any(thread.is_alive() for thread in threads)
    assert not inside.broken


def test_writer_excludes_readers() -> None:
    lock = ReadWriteLock()
    events: list[str] = []
    writer_holding = threading.Event()

    def write() -> None:
        with lock.write():
            writer_holding.set()
            time.sleep(0.05)
            events.append("write-done")

    def read() -> None:
        writer_holding.wait()
        with lock.read():
            events.append("read")

    writer = threading.Thread(target=write)
    reader = threading.Thread(target=read)
    writer.start()
    reader.start()
    writer.join(timeout=5)
    reader.join(timeout=5)

    assert events == ["write-done", "read"]


def test_waiting_writer_blocks_new_readers() -> None:
    lock = ReadWriteLock()
    order: list[str] = []

    lock.acquire_read()

    def write() -> None:
        with lock.write():
            order.append("writer")

    def late_read() -> None:
        with lock.read():
            order.append("late-reader")

    writer = threading.Thread(target=write)
    writer.start()
    deadline = time.monotonic() + 2
    while not lock._writers_waiting and time.monotonic() < deadline:
        time.sleep(0.001)
    assert lock._writers_waiting == 1

    late_reader = threading.Thread(target=late_read)
    late_reader.start()
    time.sleep(0.05)
    assert order == []

    lock.release_read()
    writer.join(timeout=5)
    late_reader.join(timeout=5)

    assert order == ["writer", "late-reader"]


def test_lock_released_when_block_raises() -> None:
    lock = ReadWriteLock()

    with pytest.raises(KeyError):
        with lock.write():
            raise KeyError("boom")

    with lock.write():
        pass
    with lock.read():
        pass


def test_release_without_acquire_is_an_error() -> None:
    lock = ReadWriteLock()

    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()
