from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable
from urllib.parse import quote

from ..exceptions import OrderError, OrderErrorKind
from ..models_orders import Order
from ..polling import PollResult, poll_until_settled, run_poll
from .base import BaseClient

logger = logging.getLogger(__name__)


def _is_not_found(exc: Exception) -> bool:
    return isinstance(exc, OrderError) and exc.kind is OrderErrorKind.NOT_FOUND


def _retry_exhausted(exc: Exception) -> OrderError:
    return OrderError(OrderErrorKind.RETRY_EXHAUSTED, detail=str(exc))


@dataclass
class OrdersClient(BaseClient):
    poll_max_attempts: int = 5
    poll_delay_seconds: float = 2.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    error_type = OrderError

    def list_orders(self) -> list[Order]:
        payload = self._authenticated_request("GET", "/orders")
        orders = self._decode_list(Order, payload)
        logger.info("orders_listed", extra={"count": len(orders)})
        return orders

    def get_order_by_reference(self, external_reference: str) -> Order:
        if not external_reference:
            raise ValueError("external_reference must not be empty")
        payload = self._authenticated_request("GET", f"/orders/ref/{quote(external_reference, safe='')}")
        return self._decode(Order, payload)

    def poll_order(self, external_reference: str) -> PollResult[Order]:
        return run_poll(
            lambda: self.get_order_by_reference(external_reference),
            lambda order: order.is_processed,
            _is_not_found,
            max_attempts=self.poll_max_attempts,
            delay_seconds=self.poll_delay_seconds,
            on_exhausted=_retry_exhausted,
            sleep=self.sleep,
        )

    def wait_for_settled_order(self, external_reference: str) -> Order:
        """Fetch the order created by a checkout until the gateway has processed it.

        Returns the last fetched order even when it never settled. Raises
        OrderError(RETRY_EXHAUSTED) when the order was never found and any
        other error as soon as it occurs.
        """
        logger.info("order_poll_started", extra={"max_attempts": self.poll_max_attempts})
        return poll_until_settled(
            lambda: self.get_order_by_reference(external_reference),
            lambda order: order.is_processed,
            _is_not_found,
            max_attempts=self.poll_max_attempts,
            delay_seconds=self.poll_delay_seconds,
            on_exhausted=_retry_exhausted,
            sleep=self.sleep,
        )
