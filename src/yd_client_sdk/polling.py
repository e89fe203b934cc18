from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PollState(str, Enum):
    ATTEMPTING = "attempting"
    SETTLED = "settled"
    GAVE_UP = "gave_up"


@dataclass(frozen=True)
class PollResult(Generic[T]):
    state: PollState
    value: T | None
    attempts: int
    error: Exception | None = None

    @property
    def settled(self) -> bool:
        return self.state is PollState.SETTLED


def run_poll(
    fetch: Callable[[], T],
    is_settled: Callable[[T], bool],
    should_retry: Callable[[Exception], bool],
    *,
    max_attempts: int = 5,
    delay_seconds: float = 2.0,
    on_exhausted: Callable[[Exception], Exception] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> PollResult[T]:
    """Fetch until ``is_settled`` holds or the attempt budget runs out.

    A value that never settles is returned as SETTLED after the last attempt.
    Failures accepted by ``should_retry`` are retried; on the last attempt they
    end in GAVE_UP with ``on_exhausted(last_error)`` (or the error itself).
    Any other failure ends in GAVE_UP immediately.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    attempt = 1
    while True:
        logger.debug("poll_attempt", extra={"attempt": attempt, "max_attempts": max_attempts})
        try:
            value = fetch()
        except Exception as exc:
            if not should_retry(exc):
                logger.info("poll_gave_up", extra={"attempt": attempt, "reason": type(exc).__name__})
                return PollResult(PollState.GAVE_UP, None, attempt, exc)
            if attempt >= max_attempts:
                error = on_exhausted(exc) if on_exhausted is not None else exc
                logger.info("poll_exhausted", extra={"attempt": attempt})
                return PollResult(PollState.GAVE_UP, None, attempt, error)
        else:
            if is_settled(value):
                logger.info("poll_settled", extra={"attempt": attempt})
                return PollResult(PollState.SETTLED, value, attempt)
            if attempt >= max_attempts:
                logger.info("poll_settled_unprocessed", extra={"attempt": attempt})
                return PollResult(PollState.SETTLED, value, attempt)
        sleep(delay_seconds)
        attempt += 1


def poll_until_settled(
    fetch: Callable[[], T],
    is_settled: Callable[[T], bool],
    should_retry: Callable[[Exception], bool],
    *,
    max_attempts: int = 5,
    delay_seconds: float = 2.0,
    on_exhausted: Callable[[Exception], Exception] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    result = run_poll(
        fetch,
        is_settled,
        should_retry,
        max_attempts=max_attempts,
        delay_seconds=delay_seconds,
        on_exhausted=on_exhausted,
        sleep=sleep,
    )
    if result.error is not None:
        raise result.error
    return result.value  # type: ignore[return-value]
