from abc import abstractmethod
from datetime import datetime
from typing import Any

from pydantic import Field, field_serializer

from tinkoff_sdk.token import render_uint
from tinkoff_sdk.types import Receipt, WireModel


def render_time(value: datetime) -> str:
    return value.isoformat(timespec="seconds")


def put_if_present(values: dict[str, str], key: str, value: str | int | None) -> None:
    """Add ``value`` under ``key`` unless it is the zero value of its type."""
    if value is None or value == "" or value == 0:
        return
    values[key] = render_uint(value) if isinstance(value, int) else value


class SignableRequest(WireModel):
    """
    Base for every outbound request.

    Subclasses declare their wire fields as aliased pydantic fields and list
    the ones taking part in the token in ``values_for_token``. ``TerminalKey``
    and ``Token`` are filled in by the client right before sending.
    """

    terminal_key: str = Field(default="", alias="TerminalKey")
    token: str = Field(default="", alias="Token")

    @abstractmethod
    def values_for_token(self) -> dict[str, str]:
        ...

    def set_terminal_key(self, terminal_key: str) -> None:
        self.terminal_key = terminal_key

    def set_token(self, token: str) -> None:
        self.token = token

    def to_wire(self) -> dict[str, Any]:
        # Fields left at their zero value are omitted, not sent as null/0.
        return self.model_dump(mode="json", by_alias=True, exclude_defaults=True)


class InitRequest(SignableRequest):
    amount: int = Field(alias="Amount", ge=0)  # kopecks
    order_id: str = Field(alias="OrderId", min_length=1)
    client_ip: str = Field(default="", alias="IP")
    description: str = Field(default="", alias="Description")
    language: str = Field(default="", alias="Language")
    recurrent: str = Field(default="", alias="Recurrent")
    customer_key: str = Field(default="", alias="CustomerKey")
    redirect_due_date: datetime | None = Field(default=None, alias="RedirectDueDate")
    notification_url: str = Field(default="", alias="NotificationURL")
    success_url: str = Field(default="", alias="SuccessURL")
    fail_url: str = Field(default="", alias="FailURL")
    pay_type: str = Field(default="", alias="PayType")
    data: dict[str, str] | None = Field(default=None, alias="DATA")
    receipt: Receipt | None = Field(default=None, alias="Receipt")

    @field_serializer("redirect_due_date")
    def _serialize_redirect_due_date(self, value: datetime | None) -> str | None:
        return render_time(value) if value is not None else None

    def values_for_token(self) -> dict[str, str]:
        values = {
            "Amount": render_uint(self.amount),
            "OrderId": self.order_id,
        }
        put_if_present(values, "IP", self.client_ip)
        put_if_present(values, "Description", self.description)
        put_if_present(values, "Language", self.language)
        put_if_present(values, "Recurrent", self.recurrent)
        put_if_present(values, "CustomerKey", self.customer_key)
        if self.redirect_due_date is not None:
            values["RedirectDueDate"] = render_time(self.redirect_due_date)
        put_if_present(values, "NotificationURL", self.notification_url)
        put_if_present(values, "SuccessURL", self.success_url)
        put_if_present(values, "FailURL", self.fail_url)
        put_if_present(values, "PayType", self.pay_type)
        return values


class GetStateRequest(SignableRequest):
    # Upstream documents PaymentId as number(20) but transmits it as a string.
    payment_id: str = Field(alias="PaymentId")
    client_ip: str = Field(default="", alias="IP")

    def values_for_token(self) -> dict[str, str]:
        return {
            "IP": self.client_ip,
            "PaymentId": self.payment_id,
        }


class CancelRequest(SignableRequest):
    payment_id: str = Field(alias="PaymentId")
    client_ip: str = Field(default="", alias="IP")
    amount: int = Field(default=0, alias="Amount", ge=0)  # refund amount, kopecks
    receipt: Receipt | None = Field(default=None, alias="Receipt")

    def values_for_token(self) -> dict[str, str]:
        values = {
            "PaymentId": self.payment_id,
            "IP": self.client_ip,
        }
        put_if_present(values, "Amount", self.amount)
        return values


class ConfirmRequest(SignableRequest):
    payment_id: str = Field(alias="PaymentId")
    client_ip: str = Field(default="", alias="IP")
    amount: int = Field(default=0, alias="Amount", ge=0)
    receipt: Receipt | None = Field(default=None, alias="Receipt")

    def values_for_token(self) -> dict[str, str]:
        values = {
            "PaymentId": self.payment_id,
            "IP": self.client_ip,
        }
        put_if_present(values, "Amount", self.amount)
        return values


class ResendRequest(SignableRequest):
    def values_for_token(self) -> dict[str, str]:
        return {}
