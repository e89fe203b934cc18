from __future__ import annotations

import logging
from typing import Callable, TypeVar

from .exceptions import SessionError, SessionErrorKind
from .session import SessionManager

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_token_error(exc: BaseException) -> bool:
    """True when a failure looks like a rejected or stale credential.

    Classification relies on structured attributes only: HTTP 401/403,
    provider auth-invalidation codes and unrecoverable session kinds all
    expose ``is_auth_failure``.
    """
    return bool(getattr(exc, "is_auth_failure", False))


class AuthenticatedOperationRunner:
    """Runs operations that need a bearer token, one at a time per session."""

    def __init__(self, session: SessionManager) -> None:
        self.session = session

    def run(self, operation: Callable[[str], T]) -> T:
        with self.session.operation_lock:
            self.session.require_authenticated()
            try:
                return operation(self.session.current_token())
            except Exception as exc:
                if not is_token_error(exc):
                    raise
                logger.info("auth_operation_token_rejected", extra={"reason": type(exc).__name__})
            return self._retry_with_fresh_token(operation)

    def _retry_with_fresh_token(self, operation: Callable[[str], T]) -> T:
        try:
            token = self.session.fresh_token()
            return operation(token)
        except Exception as exc:
            if not is_token_error(exc):
                raise
            logger.warning("auth_operation_retry_rejected", extra={"reason": type(exc).__name__})
            self.session.record_error(SessionError(SessionErrorKind.TOKEN_EXPIRED))
            raise SessionError(SessionErrorKind.USER_NOT_AUTHENTICATED) from exc
