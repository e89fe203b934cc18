from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import Mapping, Sequence

from .models_checkout import CheckoutItem, CheckoutPayload
from .models_events import EventDetails, Ticket

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def round_cents(value: Decimal | float | int | str) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CheckoutTotals:
    subtotal: Decimal
    fee: Decimal
    total: Decimal
    ticket_count: int


def _quantity(counts: Mapping[str, int], ticket_id: str) -> int:
    return max(counts.get(ticket_id, 0), 0)


def compute_checkout_totals(
    tickets: Sequence[Ticket],
    counts: Mapping[str, int],
    fee_rate: Decimal | float | str,
) -> CheckoutTotals:
    raw_subtotal = sum(
        (Decimal(str(ticket.precio)) * _quantity(counts, ticket.id) for ticket in tickets),
        ZERO,
    )
    subtotal = round_cents(raw_subtotal)
    fee = round_cents(subtotal * Decimal(str(fee_rate)))
    ticket_count = sum(_quantity(counts, ticket.id) for ticket in tickets)
    return CheckoutTotals(subtotal=subtotal, fee=fee, total=subtotal + fee, ticket_count=ticket_count)


def fee_label(fee_rate: Decimal | float | str) -> str:
    percent = (Decimal(str(fee_rate)) * 100).to_integral_value(rounding=ROUND_DOWN)
    return f"Cuota ({percent}%)"


def build_line_items(
    tickets: Sequence[Ticket],
    counts: Mapping[str, int],
    fee_rate: Decimal | float | str,
) -> list[CheckoutItem]:
    items = [
        CheckoutItem(name=ticket.descripcion.strip(), qty=_quantity(counts, ticket.id), price=round_cents(ticket.precio))
        for ticket in tickets
        if _quantity(counts, ticket.id) > 0
    ]
    totals = compute_checkout_totals(tickets, counts, fee_rate)
    if totals.fee > 0:
        items.append(CheckoutItem(name=fee_label(fee_rate), qty=1, price=totals.fee))
    return items


def build_checkout_payload(
    event: EventDetails,
    counts: Mapping[str, int],
    payer_email: str | None = None,
) -> CheckoutPayload:
    return CheckoutPayload(
        items=build_line_items(event.tickets, counts, event.cuota_servicio),
        payer_email=payer_email or "",
    )
