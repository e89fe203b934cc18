from __future__ import annotations

import pytest
import responses

from yd_client_sdk.clients.verification_client import VerificationClient
from yd_client_sdk.exceptions import VerificationError, VerificationErrorKind

from conftest import BASE_URL

STATUS_URL = f"{BASE_URL}/verification/status"
CAN_PURCHASE_URL = f"{BASE_URL}/verification/can-purchase"


@pytest.fixture
def client(http, session) -> VerificationClient:
    return VerificationClient(http=http, session=session)


@responses.activate
def test_verification_status(client: VerificationClient) -> None:
    body = {
        "success": True,
        "data": {"verified": True, "auth_verified": True, "message": "Verificado", "can_purchase": True},
    }
    responses.add(responses.GET, STATUS_URL, json=body, status=200)

    data = client.get_verification_status()

    assert data.verified is True
    assert data.can_purchase is True


@responses.activate
def test_forbidden_body_is_decoded(client: VerificationClient) -> None:
    body = {
        "success": True,
        "data": {"verified": False, "message": "Verifica tu correo", "can_purchase": False},
    }
    responses.add(responses.GET, STATUS_URL, json=body, status=403)

    data = client.get_verification_status()

    assert data.verified is False
    assert data.message == "Verifica tu correo"


@responses.activate
def test_empty_forbidden_body_is_unauthorized(client: VerificationClient) -> None:
    responses.add(responses.GET, STATUS_URL, body="", status=403)

    with pytest.raises(VerificationError) as excinfo:
        client.get_verification_status()

    assert excinfo.value.kind is VerificationErrorKind.UNAUTHORIZED
    assert excinfo.value.status_code == 403


@responses.activate
def test_unsuccessful_status_envelope(client: VerificationClient) -> None:
    responses.add(responses.GET, STATUS_URL, json={"success": False, "error": "sin datos"}, status=200)

    with pytest.raises(VerificationError) as excinfo:
        client.get_verification_status()

    assert excinfo.value.kind is VerificationErrorKind.SERVER_ERROR
    assert excinfo.value.message == "sin datos"


@responses.activate
def test_can_purchase(client: VerificationClient) -> None:
    responses.add(responses.GET, CAN_PURCHASE_URL, json={"success": True, "can_purchase": True}, status=200)

    assert client.can_purchase() is True


@responses.activate
def test_quick_check_is_false_on_failure(client: VerificationClient) -> None:
    responses.add(responses.GET, CAN_PURCHASE_URL, json={"message": "boom"}, status=500)

    assert client.quick_verification_check() is False


@responses.activate
def test_quick_check_reports_denied_purchase(client: VerificationClient) -> None:
    responses.add(responses.GET, CAN_PURCHASE_URL, json={"success": True, "can_purchase": False}, status=403)

    assert client.quick_verification_check() is False
