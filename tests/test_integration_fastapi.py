import json

from fastapi import FastAPI
from fastapi.testclient import TestClient

from tinkoff_sdk.integrations.fastapi import create_notification_router
from tinkoff_sdk.notifications import Notification, NotificationVerifier
from tinkoff_sdk.token import generate_token


def _signed_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "TerminalKey": "TestTerm",
        "OrderId": "order-9",
        "Success": True,
        "Status": "AUTHORIZED",
        "PaymentId": "900",
        "ErrorCode": "0",
        "Amount": 2500,
    }
    payload["Token"] = generate_token(
        {
            "TerminalKey": "TestTerm",
            "OrderId": "order-9",
            "Success": "true",
            "Status": "AUTHORIZED",
            "PaymentId": "900",
            "ErrorCode": "0",
            "Amount": "2500",
            "Password": "secretpwd",
        }
    )
    payload.update(overrides)
    return payload


def _app(received: list[Notification], *, use_async_handler: bool = False) -> TestClient:
    def handler(notification: Notification) -> None:
        received.append(notification)

    async def async_handler(notification: Notification) -> None:
        received.append(notification)

    app = FastAPI()
    app.include_router(
        create_notification_router(
            NotificationVerifier("secretpwd"),
            async_handler if use_async_handler else handler,
            path="/tinkoff/notify",
        )
    )
    return TestClient(app)


def test_verified_notification_is_acknowledged_with_ok() -> None:
    received: list[Notification] = []
    client = _app(received)

    response = client.post("/tinkoff/notify", content=json.dumps(_signed_payload()))

    assert response.status_code == 200
    assert response.text == "OK"
    assert response.headers["content-type"].startswith("text/plain")
    assert [n.payment_id for n in received] == ["900"]


def test_async_handler_is_awaited() -> None:
    received: list[Notification] = []
    client = _app(received, use_async_handler=True)

    response = client.post("/tinkoff/notify", content=json.dumps(_signed_payload()))

    assert response.text == "OK"
    assert len(received) == 1


def test_tampered_notification_is_rejected_before_handler() -> None:
    received: list[Notification] = []
    client = _app(received)

    response = client.post("/tinkoff/notify", content=json.dumps(_signed_payload(Amount=1)))

    assert response.status_code == 403
    assert response.text != "OK"
    assert response.json()["detail"]["error_code"] == "tinkoff:signature_invalid"
    assert received == []


def test_malformed_body_is_bad_request() -> None:
    received: list[Notification] = []
    client = _app(received)

    response = client.post("/tinkoff/notify", content=b"garbage")

    assert response.status_code == 400
    assert received == []
