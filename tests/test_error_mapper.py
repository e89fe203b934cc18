from __future__ import annotations

import pytest

from yd_client_sdk.error_mapper import decoding_error, kind_name_for_status, map_http_error, server_message
from yd_client_sdk.exceptions import (
    DOMAIN_KIND_TYPES,
    GENERIC_KIND_NAMES,
    CheckoutError,
    HttpStatusError,
    OrderError,
    OrderErrorKind,
    ResponseDecodeError,
    SessionError,
    SessionErrorKind,
    TransportError,
    TransportFailure,
    VerificationError,
    VerificationErrorKind,
)


def test_error_codes_are_unique_across_domains() -> None:
    codes = [kind.code for kind_type in DOMAIN_KIND_TYPES for kind in kind_type]
    assert len(codes) == len(set(codes))


@pytest.mark.parametrize("kind_type", [k for k in DOMAIN_KIND_TYPES if k is not SessionErrorKind])
def test_http_domains_declare_generic_kinds(kind_type) -> None:
    names = {kind.name for kind in kind_type}
    assert set(GENERIC_KIND_NAMES) <= names


def test_code_prefix_matches_domain() -> None:
    assert all(kind.code.startswith("ORD_") for kind in OrderErrorKind)
    assert all(kind.code.startswith("SES_") for kind in SessionErrorKind)


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (401, "UNAUTHORIZED"),
        (404, "NOT_FOUND"),
        (500, "SERVER_ERROR"),
        (503, "SERVER_ERROR"),
        (400, "REQUEST_FAILED"),
        (409, "REQUEST_FAILED"),
    ],
)
def test_kind_name_for_status(status: int, expected: str) -> None:
    assert kind_name_for_status(status) == expected


def test_kind_name_for_status_rejects_success() -> None:
    with pytest.raises(ValueError):
        kind_name_for_status(204)


def test_map_status_error_keeps_server_message() -> None:
    exc = HttpStatusError(method="GET", url="u", status_code=500, payload={"message": "db down"})
    err = map_http_error(OrderError, exc)
    assert isinstance(err, OrderError)
    assert err.kind is OrderErrorKind.SERVER_ERROR
    assert err.status_code == 500
    assert err.detail == "db down"
    assert err.should_retry is True
    assert str(err) == "[ORD_007] Error del servidor. Intenta nuevamente en unos minutos. (HTTP 500)"


def test_map_status_error_uses_detail_when_kind_allows() -> None:
    exc = HttpStatusError(method="GET", url="u", status_code=502, payload={"error": "upstream"})
    err = map_http_error(VerificationError, exc)
    assert err.kind is VerificationErrorKind.SERVER_ERROR
    assert err.message == "upstream"


@pytest.mark.parametrize(
    ("failure", "expected"),
    [
        (TransportFailure.TIMEOUT, "TIMEOUT"),
        (TransportFailure.NO_INTERNET, "NO_INTERNET"),
        (TransportFailure.SERVER_UNREACHABLE, "SERVER_UNREACHABLE"),
        (TransportFailure.OTHER, "REQUEST_FAILED"),
    ],
)
def test_map_transport_error(failure: TransportFailure, expected: str) -> None:
    err = map_http_error(CheckoutError, TransportError(method="POST", url="u", failure=failure))
    assert err.kind.name == expected
    assert err.status_code is None


def test_map_decode_error() -> None:
    err = map_http_error(OrderError, ResponseDecodeError(method="GET", url="u", status_code=200, reason="bad"))
    assert err.kind is OrderErrorKind.DECODING_ERROR
    assert err.should_retry is False


def test_decoding_error_helper_keeps_payload() -> None:
    err = decoding_error(OrderError, ValueError("shape"), payload=[1])
    assert err.kind is OrderErrorKind.DECODING_ERROR
    assert err.raw_payload == [1]


def test_server_message() -> None:
    assert server_message({"message": " hi "}) == "hi"
    assert server_message({"error": "boom"}) == "boom"
    assert server_message({"message": ""}) is None
    assert server_message(["x"]) is None


def test_error_requires_matching_kind() -> None:
    with pytest.raises(TypeError):
        OrderError(SessionErrorKind.TOKEN_EXPIRED)


def test_auth_failure_flags() -> None:
    assert HttpStatusError(method="GET", url="u", status_code=401).is_auth_failure
    assert HttpStatusError(method="GET", url="u", status_code=403).is_auth_failure
    assert not HttpStatusError(method="GET", url="u", status_code=404).is_auth_failure
    assert OrderError(OrderErrorKind.UNAUTHORIZED).is_auth_failure
    assert not OrderError(OrderErrorKind.TIMEOUT).is_auth_failure
    assert SessionError(SessionErrorKind.TOKEN_EXPIRED).is_auth_failure
    assert not SessionError(SessionErrorKind.TOKEN_REFRESH_FAILED).is_auth_failure
