import json
import logging
from typing import Any

from pydantic import (
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    ValidatorFunctionWrapHandler,
    model_validator,
)

from tinkoff_sdk.errors import SerializationError, SignatureVerificationError
from tinkoff_sdk.responses import ResponseEnvelope
from tinkoff_sdk.token import generate_token, render_bool, render_uint, tokens_match

NOTIFICATION_SUCCESS_RESPONSE = "OK"

_UNSIGNED_FIELDS = frozenset({"Token", "DATA", "Receipt"})

logger = logging.getLogger("tinkoff.notifications")


def _render_scalar(value: Any) -> str | None:
    if isinstance(value, bool):
        return render_bool(value)
    if isinstance(value, int):
        return render_uint(value)
    if isinstance(value, (str, float)):
        return str(value)
    # Nested objects are never signed.
    return None


class Notification(ResponseEnvelope):
    """
    Payment state change pushed by the bank to the merchant's
    ``NotificationURL``.

    Unknown scalar fields are kept because the bank signs every root-level
    scalar it sends.
    """

    # Only wire names populate fields; any other key is kept and signed as sent.
    model_config = ConfigDict(populate_by_name=False, extra="allow", coerce_numbers_to_str=True)

    order_id: str = Field(default="", alias="OrderId")
    status: str = Field(default="", alias="Status")
    payment_id: str = Field(default="", alias="PaymentId")
    amount: int = Field(default=0, alias="Amount")  # kopecks
    rebill_id: str = Field(default="", alias="RebillId")
    card_id: str = Field(default="", alias="CardId")
    pan: str = Field(default="", alias="Pan")
    exp_date: str = Field(default="", alias="ExpDate")
    token: str = Field(default="", alias="Token")
    data: dict[str, Any] | None = Field(default=None, alias="DATA")

    _wire_keys: frozenset[str] = PrivateAttr(default=frozenset())

    @model_validator(mode="wrap")
    @classmethod
    def _track_wire_keys(
        cls, payload: Any, handler: ValidatorFunctionWrapHandler
    ) -> "Notification":
        if not isinstance(payload, dict):
            return handler(payload)
        # A null field is treated as absent.
        payload = {key: value for key, value in payload.items() if value is not None}
        notification = handler(payload)
        notification._wire_keys = frozenset(payload)
        return notification

    def values_for_token(self) -> dict[str, str]:
        """Render exactly the fields present in the received payload, by wire name."""
        attribute_by_wire_name = {
            field.alias or name: name for name, field in type(self).model_fields.items()
        }
        extra = self.model_extra or {}
        values: dict[str, str] = {}
        for wire_name in self._wire_keys:
            if wire_name in _UNSIGNED_FIELDS:
                continue
            if wire_name in attribute_by_wire_name:
                value = getattr(self, attribute_by_wire_name[wire_name])
            else:
                value = extra.get(wire_name)
            rendered = _render_scalar(value)
            if rendered is not None:
                values[wire_name] = rendered
        return values


class NotificationVerifier:
    def __init__(self, password: str) -> None:
        self._password = password

    @property
    def success_response(self) -> str:
        return NOTIFICATION_SUCCESS_RESPONSE

    def expected_token(self, notification: Notification) -> str:
        values = notification.values_for_token()
        values["Password"] = self._password
        return generate_token(values)

    def verify(self, raw_body: bytes | str) -> Notification:
        """
        Decode a notification body and check its token.

        Raises ``SerializationError`` when the body is not a JSON object of
        the expected shape and ``SignatureVerificationError`` when the token
        does not match. The notification is returned only once verified.
        """
        try:
            payload = json.loads(raw_body)
        except ValueError as exc:
            raise SerializationError("notification body is not valid JSON") from exc
        if not isinstance(payload, dict):
            raise SerializationError("notification body must be a JSON object")

        try:
            notification = Notification.model_validate(payload)
        except ValidationError as exc:
            raise SerializationError(
                "notification has an unexpected shape",
                details={"errors": exc.errors(include_url=False)},
            ) from exc

        if not notification.token or not tokens_match(
            self.expected_token(notification), notification.token
        ):
            logger.warning(
                "notification_signature_invalid",
                extra={
                    "event_name": "notification_signature_invalid",
                    "payment_id": notification.payment_id,
                    "order_id": notification.order_id,
                    "status": notification.status,
                },
            )
            raise SignatureVerificationError(
                "notification token mismatch",
                details={"payment_id": notification.payment_id},
            )

        logger.info(
            "notification_verified",
            extra={
                "event_name": "notification_verified",
                "payment_id": notification.payment_id,
                "order_id": notification.order_id,
                "status": notification.status,
            },
        )
        return notification
