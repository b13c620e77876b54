"""
Exception hierarchy.

Every failure reaching the caller is a ``TinkoffError``. Nothing in the SDK
retries or suppresses these errors.
"""
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tinkoff_sdk.responses import ResponseEnvelope


class TinkoffError(Exception):
    """Base exception for all SDK errors."""

    def __init__(
        self,
        error_code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class SerializationError(TinkoffError):
    """A request could not be encoded or a response body could not be decoded."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__("tinkoff:serialization", message, details)


class TransportError(TinkoffError):
    """
    Network failure, timeout, or an HTTP error status whose body is not a
    decodable API response.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__("tinkoff:transport", message, details)


class APIError(TinkoffError):
    """
    The API answered with a well-formed envelope reporting failure.

    ``error_code`` holds the upstream ``ErrorCode``; the decoded response is
    kept on ``response`` so its diagnostic fields stay inspectable.
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: str = "",
        response: "ResponseEnvelope | None" = None,
    ) -> None:
        self.response = response
        super().__init__(error_code, message, {"details": details} if details else None)

    def __str__(self) -> str:
        text = f"tinkoff api error {self.error_code}: {self.message}"
        upstream_details = self.details.get("details")
        if upstream_details:
            text = f"{text} ({upstream_details})"
        return text


class SignatureVerificationError(TinkoffError):
    """An inbound notification's token does not match the recomputed one."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__("tinkoff:signature_invalid", message, details)
