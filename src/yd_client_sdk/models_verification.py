from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .models import ApiEnvelope


class VerificationData(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    verified: bool
    auth_verified: bool | None = None
    firestore_status: str | None = None
    message: str
    can_purchase: bool


class VerificationStatusResponse(ApiEnvelope):
    data: VerificationData | None = None


class CanPurchaseResponse(ApiEnvelope):
    can_purchase: bool = Field(default=False)
    verified: bool = False
