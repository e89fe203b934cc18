from __future__ import annotations

from typing import Mapping, TypeVar

from .exceptions import (
    AppError,
    HttpError,
    HttpStatusError,
    ResponseDecodeError,
    TransportError,
    TransportFailure,
)

E = TypeVar("E", bound=AppError)

_TRANSPORT_KIND_NAMES = {
    TransportFailure.TIMEOUT: "TIMEOUT",
    TransportFailure.NO_INTERNET: "NO_INTERNET",
    TransportFailure.SERVER_UNREACHABLE: "SERVER_UNREACHABLE",
    TransportFailure.OTHER: "REQUEST_FAILED",
}


def kind_name_for_status(status_code: int) -> str:
    if 200 <= status_code < 300:
        raise ValueError(f"HTTP {status_code} is not an error status")
    if status_code == 401:
        return "UNAUTHORIZED"
    if status_code == 404:
        return "NOT_FOUND"
    if 500 <= status_code < 600:
        return "SERVER_ERROR"
    return "REQUEST_FAILED"


def kind_name_for_transport(failure: TransportFailure) -> str:
    return _TRANSPORT_KIND_NAMES[failure]


def server_message(payload: object | None) -> str | None:
    if not isinstance(payload, Mapping):
        return None
    for key in ("message", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def map_http_error(error_type: type[E], exc: HttpError) -> E:
    """Translate a transport/HTTP failure into the given domain's error."""
    kinds = error_type.kind_type
    if isinstance(exc, TransportError):
        return error_type(kinds[kind_name_for_transport(exc.failure)], detail=exc.reason)
    if isinstance(exc, ResponseDecodeError):
        return error_type(kinds["DECODING_ERROR"], detail=exc.reason, status_code=exc.status_code)
    if isinstance(exc, HttpStatusError):
        return error_type(
            kinds[kind_name_for_status(exc.status_code)],
            detail=server_message(exc.payload),
            status_code=exc.status_code,
            raw_payload=exc.payload,
        )
    return error_type(kinds["REQUEST_FAILED"], detail=str(exc))


def decoding_error(error_type: type[E], exc: Exception, payload: object | None = None) -> E:
    return error_type(error_type.kind_type["DECODING_ERROR"], detail=str(exc), raw_payload=payload)
