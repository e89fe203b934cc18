from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, TypeVar

from .config import ClientConfig
from .exceptions import UNRECOVERABLE_SESSION_KINDS, SessionError, SessionErrorKind
from .locks import FifoLock
from .token_provider import Identity, ProviderError, TokenProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Stale errors a successful token read makes obsolete.
_TOKEN_ERROR_KINDS = frozenset({SessionErrorKind.TOKEN_EXPIRED, SessionErrorKind.TOKEN_REFRESH_FAILED})


class AuthStatus(str, Enum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class SessionUser:
    uid: str
    email: str
    is_email_verified: bool
    display_name: str | None = None

    @classmethod
    def from_identity(cls, identity: Identity) -> "SessionUser":
        return cls(
            uid=identity.uid,
            email=identity.email or "",
            is_email_verified=identity.email_verified,
            display_name=identity.display_name,
        )


@dataclass(frozen=True)
class SessionState:
    auth_status: AuthStatus
    current_identity: SessionUser | None
    last_error: SessionError | None
    initializing: bool

    @property
    def is_authenticated(self) -> bool:
        return self.auth_status is AuthStatus.AUTHENTICATED


SessionListener = Callable[[SessionState], None]


@dataclass(frozen=True)
class _StateChange:
    identity: Identity | None


@dataclass(frozen=True)
class _Publish:
    state: SessionState


_STOP = object()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionManager:
    """Authoritative view of the signed-in user for one API session.

    Provider notifications are only enqueued by the provider callback; a single
    coordinator thread applies them to the session state and republishes a
    SessionState snapshot to subscribers. Authenticated operations and sign-out
    share ``operation_lock`` so at most one of them is in flight at a time.
    """

    def __init__(
        self,
        provider: TokenProvider,
        *,
        init_wait_seconds: float = 3.0,
        init_timeout_seconds: float = 10.0,
        token_check_interval_seconds: float = 180.0,
        token_refresh_threshold_seconds: float = 300.0,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.provider = provider
        self.init_wait_seconds = init_wait_seconds
        self.init_timeout_seconds = init_timeout_seconds
        self.token_check_interval_seconds = token_check_interval_seconds
        self.token_refresh_threshold_seconds = token_refresh_threshold_seconds
        self.operation_lock = FifoLock()
        self._clock = clock
        self._lock = threading.RLock()
        self._auth_status = AuthStatus.UNKNOWN
        self._identity: SessionUser | None = None
        self._last_error: SessionError | None = None
        self._initialized = threading.Event()
        self._events: queue.Queue[object] = queue.Queue()
        self._subscribers: list[SessionListener] = []
        self._coordinator: threading.Thread | None = None
        self._init_timer: threading.Timer | None = None
        self._monitor: threading.Thread | None = None
        self._monitor_stop: threading.Event | None = None
        self._listener_handle: object | None = None
        self._started = False
        self._closed = False

    @classmethod
    def from_config(cls, provider: TokenProvider, config: ClientConfig) -> "SessionManager":
        return cls(
            provider,
            init_wait_seconds=config.session_init_wait_seconds,
            init_timeout_seconds=config.session_init_timeout_seconds,
            token_check_interval_seconds=config.token_check_interval_seconds,
            token_refresh_threshold_seconds=config.token_refresh_threshold_seconds,
        )

    # Lifecycle

    def start(self) -> "SessionManager":
        with self._lock:
            if self._started:
                return self
            if self._closed:
                raise RuntimeError("SessionManager is closed")
            self._started = True
        logger.info("session_starting")
        self._coordinator = threading.Thread(
            target=self._run_coordinator, name="yd-session-coordinator", daemon=True
        )
        self._coordinator.start()
        self._init_timer = threading.Timer(self.init_timeout_seconds, self._force_complete_initialization)
        self._init_timer.daemon = True
        self._init_timer.start()
        self._listener_handle = self.provider.add_state_listener(self._enqueue_state_change)
        return self

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            handle = self._listener_handle
            self._listener_handle = None
        if handle is not None:
            self.provider.remove_state_listener(handle)
        if self._init_timer is not None:
            self._init_timer.cancel()
        monitor = self._stop_monitor()
        self._events.put(_STOP)
        for thread in (monitor, self._coordinator):
            if thread is not None and thread is not threading.current_thread():
                thread.join(timeout=1.0)
        logger.info("session_closed")

    def __enter__(self) -> "SessionManager":
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Observers

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._subscribers:
                    self._subscribers.remove(listener)

        return unsubscribe

    # State accessors

    @property
    def state(self) -> SessionState:
        with self._lock:
            return SessionState(
                auth_status=self._auth_status,
                current_identity=self._identity,
                last_error=self._last_error,
                initializing=not self._initialized.is_set(),
            )

    @property
    def is_initializing(self) -> bool:
        return not self._initialized.is_set()

    @property
    def is_authenticated(self) -> bool:
        with self._lock:
            return self._auth_status is AuthStatus.AUTHENTICATED

    @property
    def current_user(self) -> SessionUser | None:
        with self._lock:
            return self._identity

    @property
    def last_error(self) -> SessionError | None:
        with self._lock:
            return self._last_error

    @property
    def user_id(self) -> str | None:
        user = self.current_user
        return user.uid if user else None

    @property
    def user_email(self) -> str | None:
        user = self.current_user
        return user.email if user else None

    @property
    def is_email_verified(self) -> bool:
        user = self.current_user
        return bool(user and user.is_email_verified)

    @property
    def is_ready(self) -> bool:
        if self.is_initializing:
            return False
        return self.is_authenticated or self.provider.current_user() is None

    # Tokens

    def wait_for_initialization(self, timeout: float | None = None) -> None:
        wait = self.init_wait_seconds if timeout is None else timeout
        if not self._initialized.wait(wait):
            logger.warning("session_initialization_wait_timeout", extra={"timeout_seconds": wait})
            raise SessionError(SessionErrorKind.USER_NOT_AUTHENTICATED, detail="session still initializing")

    def current_token(self) -> str:
        return self._token(force_refresh=False)

    def fresh_token(self) -> str:
        """Return a newly signed token, bypassing any provider cache."""
        return self._token(force_refresh=True)

    def _token(self, *, force_refresh: bool) -> str:
        self.wait_for_initialization()
        if self.current_user is None:
            logger.info("session_token_without_user")
            raise SessionError(SessionErrorKind.USER_NOT_AUTHENTICATED)
        try:
            token = self.provider.get_token(force_refresh=force_refresh)
        except Exception as exc:
            if isinstance(exc, ProviderError) and exc.is_auth_invalidation:
                error = SessionError(SessionErrorKind.USER_NOT_AUTHENTICATED, detail=exc.code)
            else:
                error = SessionError(SessionErrorKind.TOKEN_REFRESH_FAILED, detail=str(exc))
            logger.warning(
                "session_token_failed",
                extra={"force_refresh": force_refresh, "error_code": error.code},
            )
            self.record_error(error)
            raise error from exc
        with self._lock:
            if self._last_error is not None and (force_refresh or self._last_error.kind in _TOKEN_ERROR_KINDS):
                self._last_error = None
        logger.debug("session_token_obtained", extra={"force_refresh": force_refresh})
        return token

    def require_authenticated(self) -> None:
        if self.is_initializing:
            raise SessionError(SessionErrorKind.USER_NOT_AUTHENTICATED, detail="session still initializing")
        with self._lock:
            status = self._auth_status
            identity = self._identity
            stored = self._last_error
        if status is not AuthStatus.AUTHENTICATED or identity is None:
            raise SessionError(SessionErrorKind.USER_NOT_AUTHENTICATED)
        if stored is not None and stored.kind in UNRECOVERABLE_SESSION_KINDS:
            logger.info("session_unrecoverable_error", extra={"error_code": stored.code})
            raise SessionError(stored.kind, detail=stored.detail)

    def record_error(self, error: SessionError) -> None:
        with self._lock:
            self._last_error = error
        self._publish()

    def sign_out(self) -> None:
        with self.operation_lock:
            try:
                self.provider.sign_out()
            except Exception as exc:
                logger.warning("session_sign_out_failed", extra={"reason": type(exc).__name__})
                error = SessionError(SessionErrorKind.LOGOUT_FAILED, detail=str(exc))
                self._clear_identity(error)
                raise error from exc
            self._clear_identity(None)
            logger.info("session_signed_out")

    def with_current_user_id(self, operation: Callable[[str], T]) -> T:
        uid = self.user_id
        if not uid:
            raise SessionError(SessionErrorKind.USER_NOT_AUTHENTICATED)
        return operation(uid)

    def with_current_user_email(self, operation: Callable[[str], T]) -> T:
        email = self.user_email
        if not email:
            raise SessionError(SessionErrorKind.INVALID_USER)
        return operation(email)

    # Token expiry monitoring

    def check_token_expiration(self) -> bool:
        """Refresh the token if it expires within the threshold; returns True when refreshed."""
        with self._lock:
            if self._auth_status is not AuthStatus.AUTHENTICATED or self._last_error is not None:
                return False
        if self.operation_lock.locked():
            return False
        try:
            result = self.provider.get_token_result(force_refresh=False)
        except Exception as exc:
            logger.warning("session_token_check_failed", extra={"reason": type(exc).__name__})
            if isinstance(exc, ProviderError) and exc.is_auth_invalidation:
                self.record_error(SessionError(SessionErrorKind.TOKEN_EXPIRED, detail=exc.code))
            return False
        remaining = (result.expires_at - self._clock()).total_seconds()
        if remaining >= self.token_refresh_threshold_seconds:
            return False
        logger.info("session_token_expiring", extra={"remaining_seconds": int(remaining)})
        return self._refresh_token()

    def _refresh_token(self) -> bool:
        if self.operation_lock.locked():
            return False
        try:
            self.provider.get_token(force_refresh=True)
        except Exception as exc:
            logger.warning("session_token_refresh_failed", extra={"reason": type(exc).__name__})
            if isinstance(exc, ProviderError) and exc.is_auth_invalidation:
                self.record_error(SessionError(SessionErrorKind.TOKEN_REFRESH_FAILED, detail=exc.code))
            return False
        with self._lock:
            if self._last_error is not None and self._last_error.kind in _TOKEN_ERROR_KINDS:
                self._last_error = None
        logger.info("session_token_refreshed")
        return True

    def _start_monitor(self) -> None:
        with self._lock:
            if self._monitor is not None and self._monitor.is_alive():
                return
            stop = threading.Event()
            self._monitor_stop = stop
            self._monitor = threading.Thread(
                target=self._run_monitor, args=(stop,), name="yd-session-token-monitor", daemon=True
            )
            self._monitor.start()

    def _stop_monitor(self) -> threading.Thread | None:
        with self._lock:
            stop = self._monitor_stop
            monitor = self._monitor
            self._monitor_stop = None
            self._monitor = None
        if stop is not None:
            stop.set()
        return monitor

    def _run_monitor(self, stop: threading.Event) -> None:
        while not stop.wait(self.token_check_interval_seconds):
            try:
                self.check_token_expiration()
            except Exception:
                logger.exception("session_token_monitor_failed")

    # Provider event coordination

    def _enqueue_state_change(self, identity: Identity | None) -> None:
        self._events.put(_StateChange(identity))

    def _run_coordinator(self) -> None:
        while True:
            event = self._events.get()
            if event is _STOP:
                return
            if isinstance(event, _Publish):
                self._notify(event.state)
                continue
            try:
                self._apply_state_change(event.identity)
            except Exception:
                logger.exception("session_state_change_failed")
            finally:
                self._complete_initialization()

    def _apply_state_change(self, identity: Identity | None) -> None:
        if identity is None:
            logger.info("session_user_signed_out")
            with self._lock:
                self._auth_status = AuthStatus.UNAUTHENTICATED
                self._identity = None
            self._stop_monitor()
            self._publish()
            return

        try:
            self.provider.get_token_result(force_refresh=False)
        except Exception as exc:
            logger.warning("session_user_invalid", extra={"uid": identity.uid, "reason": type(exc).__name__})
            with self._lock:
                self._auth_status = AuthStatus.UNAUTHENTICATED
                self._identity = None
                self._last_error = SessionError(SessionErrorKind.INVALID_USER, detail=str(exc))
            self._stop_monitor()
            self._publish()
            return

        with self._lock:
            self._auth_status = AuthStatus.AUTHENTICATED
            self._identity = SessionUser.from_identity(identity)
            self._last_error = None
        self._start_monitor()
        logger.info("session_user_authenticated", extra={"uid": identity.uid})
        self._publish()

    def _complete_initialization(self) -> None:
        with self._lock:
            if self._initialized.is_set():
                return
            self._initialized.set()
        logger.info("session_initialized")
        self._publish()

    def _force_complete_initialization(self) -> None:
        if not self._initialized.is_set():
            logger.warning("session_initialization_timeout", extra={"timeout_seconds": self.init_timeout_seconds})
            self._complete_initialization()

    def _clear_identity(self, error: SessionError | None) -> None:
        with self._lock:
            self._auth_status = AuthStatus.UNAUTHENTICATED
            self._identity = None
            self._last_error = error
        self._stop_monitor()
        self._publish()

    def _publish(self) -> None:
        # Subscribers only run on the coordinator thread, never under operation_lock.
        self._events.put(_Publish(self.state))

    def _notify(self, snapshot: SessionState) -> None:
        with self._lock:
            listeners = list(self._subscribers)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("session_listener_failed")
