from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from ..exceptions import CheckoutError, CheckoutErrorKind, HttpError, HttpStatusError
from ..models_checkout import CheckoutSession
from ..models_events import EventDetails
from ..pricing import build_checkout_payload, compute_checkout_totals
from .base import BaseClient

logger = logging.getLogger(__name__)


def _is_verification_required(exc: HttpStatusError) -> bool:
    return exc.status_code == 403 and exc.payload_field("verification_required") is True


@dataclass
class CheckoutClient(BaseClient):
    error_type = CheckoutError

    def create_checkout_session(
        self,
        event: EventDetails,
        ticket_counts: Mapping[str, int],
        payer_email: str | None = None,
    ) -> CheckoutSession:
        """Create a payment-gateway checkout for the selected tickets.

        The token is read straight from the session without the operation
        runner's retry. A 403 carrying ``verification_required`` means the
        account email is not verified yet.
        """
        if self.session is None:
            raise RuntimeError("CheckoutClient requires a session")
        totals = compute_checkout_totals(event.tickets, ticket_counts, event.cuota_servicio)
        if totals.ticket_count <= 0:
            raise CheckoutError(CheckoutErrorKind.EMPTY_CART)

        token = self.session.current_token()
        payload = build_checkout_payload(event, ticket_counts, payer_email or self.session.user_email)
        try:
            data = self.http.request(
                "POST",
                "/create-preference",
                token=token,
                json_body=payload.model_dump(mode="json", by_alias=True),
            )
        except HttpStatusError as exc:
            if _is_verification_required(exc):
                logger.info("checkout_email_not_verified", extra={"event_id": event.id})
                raise CheckoutError(
                    CheckoutErrorKind.EMAIL_NOT_VERIFIED,
                    status_code=exc.status_code,
                    raw_payload=exc.payload,
                ) from exc
            raise self._translate(exc) from exc
        except HttpError as exc:
            raise self._translate(exc) from exc

        checkout = self._decode(CheckoutSession, data)
        logger.info(
            "checkout_session_created",
            extra={"event_id": event.id, "total": str(totals.total), "external_reference": checkout.external_reference},
        )
        return checkout
