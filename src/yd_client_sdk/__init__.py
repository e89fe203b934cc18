from .api import ApiSession
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    AppError,
    CheckoutError,
    CheckoutErrorKind,
    EventError,
    EventErrorKind,
    HttpError,
    HttpStatusError,
    OrderError,
    OrderErrorKind,
    ProfileError,
    ProfileErrorKind,
    RegisterError,
    RegisterErrorKind,
    SessionError,
    SessionErrorKind,
    Severity,
    TransportError,
    TransportFailure,
    VerificationError,
    VerificationErrorKind,
)
from .http_client import HttpClient
from .locks import FifoLock
from .logging_utils import configure_logging
from .models_checkout import CheckoutItem, CheckoutPayload, CheckoutSession
from .models_events import EventDetails, HomeEventData, Ticket
from .models_orders import Order, OrderItem, PaymentAttempt
from .models_users import RegisteredUser, RegisterRequest, UserProfile
from .models_verification import VerificationData
from .order_status import OrderStatusDisplay, PaymentOutcome, describe_status, payment_outcome
from .polling import PollResult, PollState, poll_until_settled, run_poll
from .pricing import CheckoutTotals, build_checkout_payload, compute_checkout_totals
from .runner import AuthenticatedOperationRunner, is_token_error
from .session import AuthStatus, SessionManager, SessionState, SessionUser
from .token_provider import Identity, ProviderError, TokenProvider, TokenResult
from .ui_errors import UserFacingError, to_user_facing_error

__all__ = [
    "ApiSession",
    "AppError",
    "AuthStatus",
    "AuthenticatedOperationRunner",
    "CheckoutError",
    "CheckoutErrorKind",
    "CheckoutItem",
    "CheckoutPayload",
    "CheckoutSession",
    "CheckoutTotals",
    "ClientConfig",
    "ConfigError",
    "EventDetails",
    "EventError",
    "EventErrorKind",
    "FifoLock",
    "HomeEventData",
    "HttpClient",
    "HttpError",
    "HttpStatusError",
    "Identity",
    "Order",
    "OrderError",
    "OrderErrorKind",
    "OrderItem",
    "OrderStatusDisplay",
    "PaymentAttempt",
    "PaymentOutcome",
    "PollResult",
    "PollState",
    "ProfileError",
    "ProfileErrorKind",
    "ProviderError",
    "RegisterError",
    "RegisterErrorKind",
    "RegisterRequest",
    "RegisteredUser",
    "SessionError",
    "SessionErrorKind",
    "SessionManager",
    "SessionState",
    "SessionUser",
    "Severity",
    "Ticket",
    "TokenProvider",
    "TokenResult",
    "TransportError",
    "TransportFailure",
    "UserFacingError",
    "UserProfile",
    "VerificationData",
    "VerificationError",
    "VerificationErrorKind",
    "build_checkout_payload",
    "compute_checkout_totals",
    "configure_logging",
    "describe_status",
    "is_token_error",
    "load_config",
    "payment_outcome",
    "poll_until_settled",
    "run_poll",
    "to_user_facing_error",
]
