from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _decimal_from_json(value: Any) -> Any:
    # JSON numbers arrive as floats; go through their shortest repr so 0.04 stays 0.04.
    if isinstance(value, float):
        return repr(value)
    return value


JsonDecimal = Annotated[Decimal, BeforeValidator(_decimal_from_json)]


class FirestoreTimestamp(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    seconds: int = Field(alias="_seconds")
    nanoseconds: int = Field(default=0, alias="_nanoseconds")

    @property
    def date(self) -> datetime:
        return datetime.fromtimestamp(self.seconds, tz=timezone.utc)


class ApiEnvelope(BaseModel):
    """Common ``{success, error?, message?}`` wrapper returned by several endpoints."""

    model_config = ConfigDict(extra="allow")

    success: bool
    error: str | None = None
    message: str | None = None

    def failure_message(self, default: str = "Error desconocido") -> str:
        return self.message or self.error or default
