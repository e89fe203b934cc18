from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .models import JsonDecimal


class OrderItem(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(alias="title")
    qty: int = Field(alias="quantity")


class PaymentAttempt(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int | None = None
    method: str | None = None
    status: str
    status_detail: str | None = None
    created_at: str | None = Field(default=None, alias="createdAt")
    type: str | None = None


class Order(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    items: List[OrderItem] = Field(default_factory=list)
    total: JsonDecimal
    status: str
    created_at: str | None = Field(default=None, alias="createdAt")
    external_reference: str | None = None
    payment_attempts: List[PaymentAttempt] | None = None

    @property
    def has_payment_attempts(self) -> bool:
        return bool(self.payment_attempts)

    @property
    def is_processed(self) -> bool:
        """An order is processed once the gateway has recorded a payment attempt."""
        return self.has_payment_attempts

    @property
    def item_count(self) -> int:
        return sum(item.qty for item in self.items)
