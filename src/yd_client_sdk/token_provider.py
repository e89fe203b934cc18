"""Interface of the external identity provider the session layer is built on.

The provider issues and refreshes bearer tokens and reports sign-in/sign-out
changes. Nothing here signs or validates tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol

# Provider error codes meaning the credential or the account itself is no longer valid.
AUTH_INVALIDATION_CODES = frozenset(
    {
        "USER_NOT_FOUND",
        "USER_TOKEN_EXPIRED",
        "INVALID_USER_TOKEN",
        "USER_DISABLED",
    }
)


@dataclass(frozen=True)
class Identity:
    uid: str
    email: str | None = None
    email_verified: bool = False
    display_name: str | None = None


@dataclass(frozen=True)
class TokenResult:
    token: str
    expires_at: datetime


class ProviderError(Exception):
    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        self.message = message or code
        super().__init__(f"{code}: {self.message}")

    @property
    def is_auth_invalidation(self) -> bool:
        return self.code in AUTH_INVALIDATION_CODES

    @property
    def is_auth_failure(self) -> bool:
        return self.is_auth_invalidation


StateListener = Callable[["Identity | None"], None]


class TokenProvider(Protocol):
    def current_user(self) -> Identity | None: ...

    def get_token(self, force_refresh: bool = False) -> str: ...

    def get_token_result(self, force_refresh: bool = False) -> TokenResult: ...

    def sign_out(self) -> None: ...

    def add_state_listener(self, listener: StateListener) -> object:
        """Register ``listener``; returns a handle for remove_state_listener."""
        ...

    def remove_state_listener(self, handle: object) -> None: ...
