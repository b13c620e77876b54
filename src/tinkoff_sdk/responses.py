from pydantic import ConfigDict, Field

from tinkoff_sdk.errors import APIError
from tinkoff_sdk.types import WireModel

SUCCESS_ERROR_CODE = "0"


class ResponseEnvelope(WireModel):
    """Fields shared by every API response and notification."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    terminal_key: str = Field(default="", alias="TerminalKey")
    success: bool = Field(default=False, alias="Success")
    error_code: str = Field(default="", alias="ErrorCode")
    message: str = Field(default="", alias="Message")
    details: str = Field(default="", alias="Details")

    def error(self) -> APIError | None:
        """
        Return the failure reported by the envelope, or ``None``.

        A response with ``Success`` true but a non-zero ``ErrorCode`` is
        still reported: upstream uses that combination for logical failures.
        """
        if self.success and self.error_code in ("", SUCCESS_ERROR_CODE):
            return None
        return APIError(
            self.error_code or "unknown",
            self.message or "request was not successful",
            details=self.details,
            response=self,
        )


class InitResponse(ResponseEnvelope):
    amount: int = Field(default=0, alias="Amount")
    order_id: str = Field(default="", alias="OrderId")
    status: str = Field(default="", alias="Status")
    payment_id: str = Field(default="", alias="PaymentId")
    payment_url: str = Field(default="", alias="PaymentURL")


class GetStateResponse(ResponseEnvelope):
    order_id: str = Field(default="", alias="OrderId")
    status: str = Field(default="", alias="Status")
    payment_id: str = Field(default="", alias="PaymentId")


class CancelResponse(ResponseEnvelope):
    original_amount: int = Field(default=0, alias="OriginalAmount")  # kopecks, before cancel
    new_amount: int = Field(default=0, alias="NewAmount")  # kopecks, after cancel
    order_id: str = Field(default="", alias="OrderId")
    status: str = Field(default="", alias="Status")
    payment_id: str = Field(default="", alias="PaymentId")


class ConfirmResponse(ResponseEnvelope):
    order_id: str = Field(default="", alias="OrderId")
    status: str = Field(default="", alias="Status")
    payment_id: str = Field(default="", alias="PaymentId")


class ResendResponse(ResponseEnvelope):
    count: int = Field(default=0, alias="Count")
