from .base import BaseClient
from .checkout_client import CheckoutClient
from .events_client import EventsClient
from .orders_client import OrdersClient
from .profile_client import ProfileClient
from .register_client import RegisterClient
from .verification_client import VerificationClient

__all__ = [
    "BaseClient",
    "CheckoutClient",
    "EventsClient",
    "OrdersClient",
    "ProfileClient",
    "RegisterClient",
    "VerificationClient",
]
