from __future__ import annotations

import logging
from dataclasses import dataclass

from ..exceptions import AppError, VerificationError, VerificationErrorKind
from ..models_verification import CanPurchaseResponse, VerificationData, VerificationStatusResponse
from .base import BaseClient

logger = logging.getLogger(__name__)

# The backend answers 403 with a regular JSON body for unverified accounts.
_DECODED_STATUSES = frozenset({403})


@dataclass
class VerificationClient(BaseClient):
    error_type = VerificationError

    def _get(self, path: str):
        payload = self._authenticated_request("GET", path, allow_statuses=_DECODED_STATUSES)
        if payload is None:
            raise VerificationError(VerificationErrorKind.UNAUTHORIZED, status_code=403)
        return payload

    def get_verification_status(self) -> VerificationData:
        payload = self._get("/verification/status")
        response = self._decode(VerificationStatusResponse, payload)
        if response.success and response.data is not None:
            return response.data
        raise VerificationError(
            VerificationErrorKind.SERVER_ERROR,
            detail=response.error or response.message,
            raw_payload=payload,
        )

    def can_purchase(self) -> bool:
        payload = self._get("/verification/can-purchase")
        response = self._decode(CanPurchaseResponse, payload)
        if not response.success:
            raise VerificationError(
                VerificationErrorKind.SERVER_ERROR,
                detail=response.error or "Error verificando permisos",
                raw_payload=payload,
            )
        return response.can_purchase

    def quick_verification_check(self) -> bool:
        try:
            return self.can_purchase()
        except AppError as exc:
            logger.info("verification_quick_check_failed", extra={"error_code": exc.code})
            return False
