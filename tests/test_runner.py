from __future__ import annotations

import threading
import time

import pytest

from yd_client_sdk.exceptions import HttpStatusError, OrderError, OrderErrorKind, SessionError, SessionErrorKind
from yd_client_sdk.runner import AuthenticatedOperationRunner, is_token_error
from yd_client_sdk.session import SessionManager
from yd_client_sdk.token_provider import ProviderError

from conftest import wait_for


def _unauthorized() -> HttpStatusError:
    return HttpStatusError(method="GET", url="https://api.example.com/api/orders", status_code=401)


def test_run_passes_current_token(session: SessionManager) -> None:
    runner = AuthenticatedOperationRunner(session)
    assert runner.run(lambda token: f"got:{token}") == "got:token-cached"


def test_token_error_is_retried_once_with_fresh_token(session: SessionManager, provider) -> None:
    runner = AuthenticatedOperationRunner(session)
    tokens: list[str] = []

    def operation(token: str) -> str:
        tokens.append(token)
        if len(tokens) == 1:
            raise _unauthorized()
        return "ok"

    assert runner.run(operation) == "ok"
    assert tokens == ["token-cached", "token-fresh"]
    assert provider.get_token_calls == [False, True]


def test_retry_auth_failure_becomes_user_not_authenticated(session: SessionManager) -> None:
    runner = AuthenticatedOperationRunner(session)
    calls = []

    def operation(token: str) -> None:
        calls.append(token)
        raise _unauthorized()

    with pytest.raises(SessionError) as excinfo:
        runner.run(operation)

    assert excinfo.value.kind is SessionErrorKind.USER_NOT_AUTHENTICATED
    assert len(calls) == 2
    assert session.last_error.kind is SessionErrorKind.TOKEN_EXPIRED


def test_retry_non_auth_failure_propagates(session: SessionManager) -> None:
    runner = AuthenticatedOperationRunner(session)
    calls = []

    def operation(token: str) -> None:
        calls.append(token)
        if len(calls) == 1:
            raise _unauthorized()
        raise HttpStatusError(method="GET", url="u", status_code=500)

    with pytest.raises(HttpStatusError) as excinfo:
        runner.run(operation)

    assert excinfo.value.status_code == 500
    assert len(calls) == 2


def test_non_token_failure_is_not_retried(session: SessionManager) -> None:
    runner = AuthenticatedOperationRunner(session)
    calls = []
    error = OrderError(OrderErrorKind.TIMEOUT)

    def operation(token: str) -> None:
        calls.append(token)
        raise error

    with pytest.raises(OrderError) as excinfo:
        runner.run(operation)

    assert excinfo.value is error
    assert calls == ["token-cached"]


def test_unauthenticated_session_never_runs_operation(session: SessionManager) -> None:
    session.record_error(SessionError(SessionErrorKind.INVALID_USER))
    runner = AuthenticatedOperationRunner(session)
    calls = []

    with pytest.raises(SessionError) as excinfo:
        runner.run(calls.append)

    assert excinfo.value.kind is SessionErrorKind.INVALID_USER
    assert calls == []


def test_operations_never_overlap(session: SessionManager) -> None:
    runner = AuthenticatedOperationRunner(session)
    active = 0
    peak = 0
    counter_lock = threading.Lock()

    def operation(token: str) -> None:
        nonlocal active, peak
        with counter_lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.01)
        with counter_lock:
            active -= 1

    threads = [threading.Thread(target=runner.run, args=(operation,)) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert peak == 1


def test_sign_out_waits_for_in_flight_operation(session: SessionManager, provider) -> None:
    runner = AuthenticatedOperationRunner(session)
    started = threading.Event()
    release = threading.Event()

    def operation(token: str) -> None:
        started.set()
        release.wait(2)

    worker = threading.Thread(target=runner.run, args=(operation,))
    worker.start()
    assert started.wait(2)

    signer = threading.Thread(target=session.sign_out)
    signer.start()
    time.sleep(0.05)
    assert provider.sign_out_calls == 0

    release.set()
    worker.join(timeout=2)
    signer.join(timeout=2)
    assert provider.sign_out_calls == 1


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (HttpStatusError(method="GET", url="u", status_code=401), True),
        (HttpStatusError(method="GET", url="u", status_code=403), True),
        (HttpStatusError(method="GET", url="u", status_code=404), False),
        (ProviderError("USER_NOT_FOUND"), True),
        (ProviderError("NETWORK_ERROR"), False),
        (SessionError(SessionErrorKind.TOKEN_EXPIRED), True),
        (SessionError(SessionErrorKind.TOKEN_REFRESH_FAILED), False),
        (OrderError(OrderErrorKind.UNAUTHORIZED), True),
        (ValueError("token expired"), False),
    ],
)
def test_is_token_error(exc: Exception, expected: bool) -> None:
    assert is_token_error(exc) is expected


def test_listener_signing_out_on_expired_token_does_not_block_runner(session: SessionManager, provider) -> None:
    def sign_out_on_expiry(state) -> None:
        if state.last_error is not None and state.last_error.kind is SessionErrorKind.TOKEN_EXPIRED:
            session.sign_out()

    session.subscribe(sign_out_on_expiry)
    runner = AuthenticatedOperationRunner(session)
    outcome: list[BaseException] = []

    def rejected(_token: str) -> None:
        raise _unauthorized()

    def call() -> None:
        try:
            runner.run(rejected)
        except SessionError as exc:
            outcome.append(exc)

    worker = threading.Thread(target=call, daemon=True)
    worker.start()
    worker.join(timeout=3.0)

    assert not worker.is_alive()
    assert outcome[0].kind is SessionErrorKind.USER_NOT_AUTHENTICATED
    assert wait_for(lambda: provider.sign_out_calls == 1)
    assert wait_for(lambda: not session.is_authenticated)
