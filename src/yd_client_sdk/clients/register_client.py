from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import HttpError, HttpStatusError, RegisterError, RegisterErrorKind
from ..models_users import RegisteredUser, RegisterRequest, RegisterResponse
from ..register_validation import validate_register_request
from .base import BaseClient

logger = logging.getLogger(__name__)

# Substrings the backend uses when rejecting an address that already has an account.
_EMAIL_TAKEN_HINTS = ("email", "correo", "already", "registrado")


def _validation_failed(detail: str, exc: HttpStatusError) -> RegisterError:
    return RegisterError(
        RegisterErrorKind.VALIDATION_FAILED,
        detail=detail,
        status_code=exc.status_code,
        raw_payload=exc.payload,
    )


def _bad_request_error(exc: HttpStatusError) -> RegisterError:
    message = exc.payload_field("error")
    if not isinstance(message, str) or not message:
        return _validation_failed("Error de validación", exc)
    lowered = message.lower()
    if any(hint in lowered for hint in _EMAIL_TAKEN_HINTS):
        return RegisterError(
            RegisterErrorKind.EMAIL_ALREADY_EXISTS,
            detail=message,
            status_code=exc.status_code,
            raw_payload=exc.payload,
        )
    return _validation_failed(message, exc)


def _unprocessable_error(exc: HttpStatusError) -> RegisterError:
    errors = exc.payload_field("errors")
    if isinstance(errors, list):
        messages = [item["msg"] for item in errors if isinstance(item, dict) and isinstance(item.get("msg"), str)]
        return _validation_failed("\n".join(messages) or "Datos inválidos", exc)
    message = exc.payload_field("message")
    if isinstance(message, str) and message:
        return _validation_failed(message, exc)
    return _validation_failed("Error en formato de datos enviados", exc)


def _parse_request(values: Mapping[str, Any]) -> RegisterRequest:
    try:
        return RegisterRequest.model_validate(values)
    except PydanticValidationError as exc:
        raise RegisterError(RegisterErrorKind.VALIDATION_FAILED, detail="Todos los campos son requeridos") from exc


@dataclass
class RegisterClient(BaseClient):
    error_type = RegisterError

    def register_user(self, request: RegisterRequest | Mapping[str, Any]) -> RegisteredUser:
        payload = request if isinstance(request, RegisterRequest) else _parse_request(request)
        validate_register_request(payload)
        try:
            data = self.http.request("POST", "/user/add", json_body=payload.model_dump(mode="json"))
        except HttpStatusError as exc:
            error = self._status_error(exc)
            logger.info("register_rejected", extra={"status_code": exc.status_code, "error_code": error.code})
            raise error from exc
        except HttpError as exc:
            raise self._translate(exc) from exc

        response = self._decode(RegisterResponse, data)
        if response.user is None:
            raise RegisterError(RegisterErrorKind.VALIDATION_FAILED, detail=response.message or None)
        logger.info("register_succeeded", extra={"uid": response.user.id})
        return response.user

    def _status_error(self, exc: HttpStatusError) -> RegisterError:
        status = exc.status_code
        if status == 400:
            return _bad_request_error(exc)
        if status == 401:
            return _validation_failed("Error de autenticación", exc)
        if status == 422:
            return _unprocessable_error(exc)
        return RegisterError(RegisterErrorKind.SERVER_ERROR, status_code=status, raw_payload=exc.payload)
