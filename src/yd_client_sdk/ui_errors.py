from __future__ import annotations

from dataclasses import dataclass

from .exceptions import UNRECOVERABLE_SESSION_KINDS, AppError, Severity

_FALLBACK_MESSAGE = "Ocurrió un error inesperado. Intenta nuevamente."


@dataclass(frozen=True)
class UserFacingError:
    message: str
    code: str | None = None
    icon: str = "exclamationmark.circle"
    severity: Severity = Severity.MEDIUM
    retryable: bool = False
    requires_reauthentication: bool = False
    details: str | None = None

    @property
    def technical_details(self) -> str | None:
        if self.details:
            return self.details
        return None


def to_user_facing_error(exc: BaseException) -> UserFacingError:
    if not isinstance(exc, AppError):
        return UserFacingError(message=_FALLBACK_MESSAGE, details=type(exc).__name__)
    details = exc.code
    if exc.status_code:
        details = f"{details} (HTTP {exc.status_code})"
    if exc.detail and exc.detail != exc.message:
        details = f"{details}: {exc.detail}"
    return UserFacingError(
        message=exc.message.strip() or _FALLBACK_MESSAGE,
        code=exc.code,
        icon=exc.icon,
        severity=exc.severity,
        retryable=exc.should_retry,
        requires_reauthentication=exc.kind in UNRECOVERABLE_SESSION_KINDS,
        details=details,
    )
