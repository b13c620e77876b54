from datetime import datetime, timedelta, timezone

import pytest
from pydantic import Field, ValidationError

from tinkoff_sdk.client import sign_request
from tinkoff_sdk.requests import (
    CancelRequest,
    ConfirmRequest,
    GetStateRequest,
    InitRequest,
    ResendRequest,
    SignableRequest,
)
from tinkoff_sdk.token import generate_token
from tinkoff_sdk.types import Credentials, Receipt, ReceiptItem

CREDENTIALS = Credentials(terminal_key="TestTerm", password="secretpwd")


def test_cancel_without_amount_omits_it_from_token_and_wire() -> None:
    request = CancelRequest(payment_id="12345")

    values = request.values_for_token()
    assert values == {"PaymentId": "12345", "IP": ""}
    assert "Amount" not in values
    assert "Amount" not in request.to_wire()


def test_cancel_signs_reference_vector() -> None:
    request = CancelRequest(payment_id="12345")
    token = sign_request(CREDENTIALS, request)

    assert token == "47c47e9be79b14c72594e8d9139750d3065ee8d573adf4c9707869c6ea3faffa"
    assert request.to_wire() == {
        "TerminalKey": "TestTerm",
        "Token": token,
        "PaymentId": "12345",
    }


def test_cancel_with_amount_signs_it() -> None:
    request = CancelRequest(payment_id="12345", amount=500)
    token = sign_request(CREDENTIALS, request)

    assert request.values_for_token()["Amount"] == "500"
    assert token == "ba292a340f096a4907bb2ab9e10a57269267b6ce3f19120a4bb59d6c21acccdb"
    assert request.to_wire()["Amount"] == 500


def test_signing_round_trip_matches_independent_computation() -> None:
    request = GetStateRequest(payment_id="987", client_ip="10.0.0.1")
    token = sign_request(CREDENTIALS, request)

    independent = generate_token(
        {
            "PaymentId": "987",
            "IP": "10.0.0.1",
            "TerminalKey": "TestTerm",
            "Password": "secretpwd",
        }
    )
    assert token == independent
    assert request.token == independent
    assert request.terminal_key == "TestTerm"


def test_get_state_signs_only_ip_and_payment_id() -> None:
    request = GetStateRequest(payment_id="987", client_ip="10.0.0.1")
    assert request.values_for_token() == {"IP": "10.0.0.1", "PaymentId": "987"}


def test_password_is_never_serialized() -> None:
    request = ConfirmRequest(payment_id="1", amount=100)
    sign_request(CREDENTIALS, request)

    wire = request.to_wire()
    assert "Password" not in wire
    assert "secretpwd" not in wire.values()


def test_receipt_is_sent_but_not_signed() -> None:
    receipt = Receipt(
        email="buyer@example.test",
        taxation="osn",
        items=[
            ReceiptItem(name="Book", price=10000, quantity=1, amount=10000, tax="vat20"),
        ],
    )
    request = ConfirmRequest(payment_id="1", receipt=receipt)
    sign_request(CREDENTIALS, request)

    assert "Receipt" not in request.values_for_token()
    wire_receipt = request.to_wire()["Receipt"]
    assert wire_receipt["Email"] == "buyer@example.test"
    assert "Phone" not in wire_receipt
    assert wire_receipt["Items"][0]["Name"] == "Book"


def test_init_request_token_fields() -> None:
    due = datetime(2030, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=3)))
    request = InitRequest(
        amount=14000,
        order_id="order-21",
        description="Подарочная карта",
        redirect_due_date=due,
        data={"Phone": "+71234567890"},
    )

    values = request.values_for_token()
    assert values == {
        "Amount": "14000",
        "OrderId": "order-21",
        "Description": "Подарочная карта",
        "RedirectDueDate": "2030-01-02T03:04:05+03:00",
    }

    wire = request.to_wire()
    assert wire["RedirectDueDate"] == "2030-01-02T03:04:05+03:00"
    assert wire["DATA"] == {"Phone": "+71234567890"}
    assert "IP" not in wire
    assert "NotificationURL" not in wire


def test_init_request_requires_order_id() -> None:
    with pytest.raises(ValidationError):
        InitRequest(amount=100, order_id="")


def test_resend_signs_credentials_only() -> None:
    request = ResendRequest()
    token = sign_request(CREDENTIALS, request)

    assert request.values_for_token() == {}
    assert token == generate_token({"TerminalKey": "TestTerm", "Password": "secretpwd"})
    assert request.to_wire() == {"TerminalKey": "TestTerm", "Token": token}


def test_requests_accept_wire_names() -> None:
    request = CancelRequest.model_validate({"PaymentId": "5", "IP": "1.2.3.4", "Amount": 10})
    assert request.payment_id == "5"
    assert request.client_ip == "1.2.3.4"
    assert request.amount == 10


def test_credentials_repr_hides_password() -> None:
    assert "secretpwd" not in repr(CREDENTIALS)


def test_request_kind_without_token_fields_cannot_be_built() -> None:
    class RefundRequest(SignableRequest):
        payment_id: str = Field(alias="PaymentId")

    with pytest.raises(TypeError):
        RefundRequest(payment_id="1")
