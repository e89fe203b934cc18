from __future__ import annotations

import threading
from collections import deque


class FifoLock:
    """Non-reentrant mutex whose waiters acquire in arrival order."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._waiters: deque[object] = deque()
        self._locked = False

    def acquire(self, timeout: float | None = None) -> bool:
        ticket = object()
        with self._cond:
            self._waiters.append(ticket)
            acquired = self._cond.wait_for(
                lambda: not self._locked and self._waiters[0] is ticket,
                timeout,
            )
            if not acquired:
                self._waiters.remove(ticket)
                self._cond.notify_all()
                return False
            self._waiters.popleft()
            self._locked = True
            return True

    def release(self) -> None:
        with self._cond:
            if not self._locked:
                raise RuntimeError("release of an unlocked FifoLock")
            self._locked = False
            self._cond.notify_all()

    def locked(self) -> bool:
        with self._cond:
            return self._locked

    @property
    def waiting(self) -> int:
        with self._cond:
            return len(self._waiters)

    def __enter__(self) -> "FifoLock":
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
