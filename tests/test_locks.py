from __future__ import annotations

import threading

import pytest

from yd_client_sdk.locks import FifoLock

from conftest import wait_for


def test_acquire_release() -> None:
    lock = FifoLock()
    assert lock.acquire()
    assert lock.locked()
    lock.release()
    assert not lock.locked()


def test_release_unlocked_raises() -> None:
    with pytest.raises(RuntimeError):
        FifoLock().release()


def test_acquire_timeout_removes_waiter() -> None:
    lock = FifoLock()
    lock.acquire()
    assert lock.acquire(timeout=0.05) is False
    assert lock.waiting == 0
    lock.release()


def test_waiters_acquire_in_arrival_order() -> None:
    lock = FifoLock()
    order: list[int] = []
    lock.acquire()

    threads = []
    for idx in range(4):
        def worker(n: int = idx) -> None:
            with lock:
                order.append(n)

        thread = threading.Thread(target=worker)
        thread.start()
        assert wait_for(lambda expected=idx + 1: lock.waiting == expected)
        threads.append(thread)

    lock.release()
    for thread in threads:
        thread.join(timeout=2)

    assert order == [0, 1, 2, 3]
