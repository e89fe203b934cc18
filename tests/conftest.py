from __future__ import annotations

import itertools
import sys
import threading
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SDK_SRC = BASE_DIR / "src"

sys.path.insert(0, str(SDK_SRC))

from yd_client_sdk.config import load_config  # noqa: E402
from yd_client_sdk.http_client import HttpClient  # noqa: E402
from yd_client_sdk.session import SessionManager  # noqa: E402
from yd_client_sdk.token_provider import Identity, TokenResult  # noqa: E402

BASE_URL = "https://api.example.com/api"


class FakeTokenProvider:
    """In-memory identity provider that notifies listeners on registration like real SDKs do."""

    def __init__(self, identity: Identity | None = None) -> None:
        self.identity = identity
        self.token = "token-cached"
        self.refreshed_token = "token-fresh"
        self.expires_at = datetime.now(timezone.utc) + timedelta(hours=1)
        self.token_errors: list[Exception] = []
        self.result_errors: list[Exception] = []
        self.sign_out_error: Exception | None = None
        self.get_token_calls: list[bool] = []
        self.sign_out_calls = 0
        self.listeners: dict[int, object] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def current_user(self) -> Identity | None:
        return self.identity

    def get_token(self, force_refresh: bool = False) -> str:
        with self._lock:
            self.get_token_calls.append(force_refresh)
            if self.token_errors:
                raise self.token_errors.pop(0)
        return self.refreshed_token if force_refresh else self.token

    def get_token_result(self, force_refresh: bool = False) -> TokenResult:
        with self._lock:
            if self.result_errors:
                raise self.result_errors.pop(0)
        return TokenResult(token=self.token, expires_at=self.expires_at)

    def sign_out(self) -> None:
        self.sign_out_calls += 1
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.identity = None
        self.emit(None)

    def add_state_listener(self, listener) -> int:
        handle = next(self._ids)
        self.listeners[handle] = listener
        listener(self.identity)
        return handle

    def remove_state_listener(self, handle: object) -> None:
        self.listeners.pop(handle, None)

    def emit(self, identity: Identity | None) -> None:
        self.identity = identity
        for listener in list(self.listeners.values()):
            listener(identity)


def wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def identity() -> Identity:
    return Identity(uid="user-1", email="ana@example.com", email_verified=True, display_name="Ana")


@pytest.fixture
def provider(identity: Identity) -> FakeTokenProvider:
    return FakeTokenProvider(identity)


@pytest.fixture
def session(provider: FakeTokenProvider):
    manager = SessionManager(
        provider,
        init_wait_seconds=2.0,
        init_timeout_seconds=5.0,
        token_check_interval_seconds=3600.0,
    ).start()
    manager.wait_for_initialization()
    yield manager
    manager.close()


@pytest.fixture
def config(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("YD_ENV", raising=False)
    monkeypatch.delenv("YD_API_BASE_URL_DEV", raising=False)
    monkeypatch.setenv("YD_API_BASE_URL", BASE_URL)
    return load_config()


@pytest.fixture
def http(config) -> HttpClient:
    client = HttpClient(config)
    yield client
    client.close()
