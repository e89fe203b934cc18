from __future__ import annotations

from dataclasses import dataclass, field

from .clients.checkout_client import CheckoutClient
from .clients.events_client import EventsClient
from .clients.orders_client import OrdersClient
from .clients.profile_client import ProfileClient
from .clients.register_client import RegisterClient
from .clients.verification_client import VerificationClient
from .config import ClientConfig
from .http_client import HttpClient
from .runner import AuthenticatedOperationRunner
from .session import SessionManager
from .token_provider import TokenProvider


@dataclass
class ApiSession:
    """Explicitly constructed context shared by every domain client."""

    config: ClientConfig
    provider: TokenProvider
    session: SessionManager | None = None
    http: HttpClient | None = None
    runner: AuthenticatedOperationRunner = field(init=False)

    def __post_init__(self) -> None:
        self.session = self.session or SessionManager.from_config(self.provider, self.config)
        self.http = self.http or HttpClient(config=self.config)
        self.runner = AuthenticatedOperationRunner(self.session)

    def start(self) -> "ApiSession":
        self.session.start()
        return self

    def close(self) -> None:
        self.session.close()
        self.http.close()

    def __enter__(self) -> "ApiSession":
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def orders_client(self) -> OrdersClient:
        return OrdersClient(
            http=self.http,
            session=self.session,
            runner=self.runner,
            poll_max_attempts=self.config.order_poll_max_attempts,
            poll_delay_seconds=self.config.order_poll_delay_seconds,
        )

    def events_client(self) -> EventsClient:
        return EventsClient(http=self.http, session=self.session, runner=self.runner)

    def verification_client(self) -> VerificationClient:
        return VerificationClient(http=self.http, session=self.session, runner=self.runner)

    def register_client(self) -> RegisterClient:
        return RegisterClient(http=self.http)

    def profile_client(self) -> ProfileClient:
        return ProfileClient(http=self.http, session=self.session, runner=self.runner)

    def checkout_client(self) -> CheckoutClient:
        return CheckoutClient(http=self.http, session=self.session, runner=self.runner)

    def sign_out(self) -> None:
        self.session.sign_out()
