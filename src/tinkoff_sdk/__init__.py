from tinkoff_sdk.client import AsyncTinkoffClient, TinkoffClient, sign_request
from tinkoff_sdk.config import Settings
from tinkoff_sdk.errors import (
    APIError,
    SerializationError,
    SignatureVerificationError,
    TinkoffError,
    TransportError,
)
from tinkoff_sdk.notifications import (
    NOTIFICATION_SUCCESS_RESPONSE,
    Notification,
    NotificationVerifier,
)
from tinkoff_sdk.observability.logging import JsonLogFormatter, configure_logging
from tinkoff_sdk.requests import (
    CancelRequest,
    ConfirmRequest,
    GetStateRequest,
    InitRequest,
    ResendRequest,
    SignableRequest,
)
from tinkoff_sdk.responses import (
    CancelResponse,
    ConfirmResponse,
    GetStateResponse,
    InitResponse,
    ResendResponse,
    ResponseEnvelope,
)
from tinkoff_sdk.token import generate_token, tokens_match
from tinkoff_sdk.types import (
    API_V2_BASE_URL,
    Credentials,
    PaymentStatus,
    PayType,
    Receipt,
    ReceiptItem,
)

__all__ = [
    "API_V2_BASE_URL",
    "NOTIFICATION_SUCCESS_RESPONSE",
    "generate_token",
    "tokens_match",
    "sign_request",
    "Credentials",
    "Settings",
    "configure_logging",
    "JsonLogFormatter",
    "TinkoffClient",
    "AsyncTinkoffClient",
    "NotificationVerifier",
    "Notification",
    "SignableRequest",
    "InitRequest",
    "GetStateRequest",
    "CancelRequest",
    "ConfirmRequest",
    "ResendRequest",
    "ResponseEnvelope",
    "InitResponse",
    "GetStateResponse",
    "CancelResponse",
    "ConfirmResponse",
    "ResendResponse",
    "PaymentStatus",
    "PayType",
    "Receipt",
    "ReceiptItem",
    "TinkoffError",
    "SerializationError",
    "TransportError",
    "APIError",
    "SignatureVerificationError",
]
