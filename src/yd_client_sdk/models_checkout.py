from __future__ import annotations

from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class CheckoutItem(BaseModel):
    name: str
    qty: int
    price: Decimal

    @field_serializer("price")
    def _serialize_price(self, value: Decimal) -> float:
        return float(value)


class CheckoutPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: List[CheckoutItem]
    payer_email: str = Field(default="", alias="payerEmail")


class CheckoutSession(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    checkout_url: str = Field(alias="checkoutUrl")
    external_reference: str | None = Field(default=None, alias="externalReference")
