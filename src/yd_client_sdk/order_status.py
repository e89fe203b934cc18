from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .models_orders import Order


class OrderStatus(str, Enum):
    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    FAILURE = "failure"
    CREATED = "created"


class PaymentOutcome(str, Enum):
    SUCCESS = "success"
    PENDING = "pending"
    FAILED = "failed"
    USER_CANCELLED = "user_cancelled"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class OrderStatusDisplay:
    label: str
    color: str
    icon: str
    retry_eligible: bool


_FAILED_STATUSES = {OrderStatus.REJECTED.value, OrderStatus.CANCELLED.value, OrderStatus.FAILURE.value}

_DISPLAY = {
    OrderStatus.APPROVED.value: OrderStatusDisplay("Aprobado", "green", "checkmark.circle.fill", False),
    OrderStatus.PENDING.value: OrderStatusDisplay("Pendiente", "orange", "clock.circle.fill", False),
    OrderStatus.REJECTED.value: OrderStatusDisplay("Rechazado", "red", "xmark.circle.fill", True),
    OrderStatus.CANCELLED.value: OrderStatusDisplay("Cancelado", "red", "xmark.circle.fill", True),
    OrderStatus.FAILURE.value: OrderStatusDisplay("Fallido", "red", "xmark.circle.fill", True),
}

_ATTEMPT_LABELS = {
    "approved": "Pago aprobado",
    "pending": "Pago pendiente",
    "rejected": "Pago rechazado",
    "cancelled": "Pago cancelado",
    "charged_back": "Contracargo",
    "refunded": "Reembolsado",
}


def _normalize(status: str | None) -> str:
    return (status or "").strip().lower()


def describe_status(status: str | None) -> OrderStatusDisplay:
    """Presentation of an order status; unknown values pass through capitalized."""
    value = _normalize(status)
    display = _DISPLAY.get(value)
    if display is not None:
        return display
    return OrderStatusDisplay((status or "").strip().capitalize(), "gray", "questionmark.circle.fill", False)


def payment_outcome(status: str | None) -> PaymentOutcome:
    value = _normalize(status)
    if value == OrderStatus.APPROVED.value:
        return PaymentOutcome.SUCCESS
    if value == OrderStatus.PENDING.value:
        return PaymentOutcome.PENDING
    if value in _FAILED_STATUSES:
        return PaymentOutcome.FAILED
    if value == OrderStatus.CREATED.value:
        # Checkout was opened but the gateway never received a payment.
        return PaymentOutcome.USER_CANCELLED
    return PaymentOutcome.UNKNOWN


def latest_attempt_label(order: Order) -> str:
    if not order.payment_attempts:
        return "Sin intentos de pago"
    status = order.payment_attempts[-1].status
    return _ATTEMPT_LABELS.get(_normalize(status), status.capitalize())
