import logging
from time import perf_counter
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from tinkoff_sdk.config import Settings
from tinkoff_sdk.errors import SerializationError, TransportError
from tinkoff_sdk.notifications import Notification, NotificationVerifier
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
from tinkoff_sdk.token import generate_token
from tinkoff_sdk.types import API_V2_BASE_URL, Credentials

ResponseT = TypeVar("ResponseT", bound=ResponseEnvelope)

logger = logging.getLogger("tinkoff.client")


def sign_request(credentials: Credentials, request: SignableRequest) -> str:
    """Fill in ``TerminalKey`` and ``Token`` on ``request`` and return the token."""
    request.set_terminal_key(credentials.terminal_key)

    values = request.values_for_token()
    values["TerminalKey"] = credentials.terminal_key
    values["Password"] = credentials.password
    token = generate_token(values)
    request.set_token(token)
    return token


def _encode_request(request: SignableRequest) -> dict[str, Any]:
    try:
        return request.to_wire()
    except PydanticSerializationError as exc:
        raise SerializationError(
            f"cannot encode {type(request).__name__}",
        ) from exc


def _decode_response(
    response: httpx.Response, response_model: type[ResponseT], path: str
) -> ResponseT:
    try:
        body = response.json()
        result = response_model.model_validate(body)
    except (ValueError, ValidationError) as exc:
        # ValidationError is a ValueError; both mean the body is not an API response.
        if not response.is_success:
            raise TransportError(
                f"unexpected HTTP {response.status_code} from {path}",
                details={"body": response.text[:512]},
                status_code=response.status_code,
            ) from exc
        raise SerializationError(
            f"cannot decode {response_model.__name__} from {path}",
            details={"body": response.text[:512]},
        ) from exc

    api_error = result.error()
    if api_error is not None:
        raise api_error
    if not response.is_success:
        raise TransportError(
            f"unexpected HTTP {response.status_code} from {path}",
            status_code=response.status_code,
        )
    return result


def _transport_error(exc: httpx.HTTPError, path: str) -> TransportError:
    if isinstance(exc, httpx.TimeoutException):
        return TransportError(f"request to {path} timed out")
    return TransportError(f"request to {path} failed: {exc}")


def _log_request(
    path: str,
    start: float,
    *,
    status_code: int | None,
    result: ResponseEnvelope | None = None,
    error: Exception | None = None,
) -> None:
    latency_ms = (perf_counter() - start) * 1000
    error_code = getattr(error, "error_code", None)
    if result is not None:
        error_code = result.error_code
    logger.info(
        "tinkoff_request",
        extra={
            "event_name": "tinkoff_request",
            "path": path,
            "method": "POST",
            "status_code": status_code,
            "latency_ms": round(latency_ms, 2),
            "success": error is None,
            "error_code": error_code,
        },
    )


class TinkoffClient:
    def __init__(
        self,
        terminal_key: str,
        password: str,
        *,
        base_url: str = API_V2_BASE_URL,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._credentials = Credentials(terminal_key=terminal_key, password=password)
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._verifier = NotificationVerifier(password)

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: httpx.BaseTransport | None = None
    ) -> "TinkoffClient":
        return cls(
            settings.terminal_key,
            settings.password.get_secret_value(),
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def set_base_url(self, base_url: str) -> None:
        self._base_url = base_url.rstrip("/")

    def post_request(
        self,
        path: str,
        request: SignableRequest,
        response_model: type[ResponseT],
        *,
        timeout: float | None = None,
    ) -> ResponseT:
        """
        Sign ``request``, POST it to ``base_url + path`` and decode the reply.

        Raises ``APIError`` when the decoded envelope reports failure; the
        decoded response is available on the exception's ``response``.
        """
        sign_request(self._credentials, request)
        payload = _encode_request(request)

        start = perf_counter()
        status_code = None
        try:
            with httpx.Client(
                timeout=self._timeout if timeout is None else timeout,
                transport=self._transport,
            ) as client:
                response = client.post(f"{self._base_url}{path}", json=payload)
            status_code = response.status_code
            result = _decode_response(response, response_model, path)
        except httpx.HTTPError as exc:
            error = _transport_error(exc, path)
            _log_request(path, start, status_code=status_code, error=error)
            raise error from exc
        except Exception as exc:
            _log_request(path, start, status_code=status_code, error=exc)
            raise

        _log_request(path, start, status_code=status_code, result=result)
        return result

    def init(self, request: InitRequest, *, timeout: float | None = None) -> InitResponse:
        return self.post_request("/Init", request, InitResponse, timeout=timeout)

    def get_state(
        self, request: GetStateRequest, *, timeout: float | None = None
    ) -> GetStateResponse:
        return self.post_request("/GetState", request, GetStateResponse, timeout=timeout)

    def cancel(self, request: CancelRequest, *, timeout: float | None = None) -> CancelResponse:
        return self.post_request("/Cancel", request, CancelResponse, timeout=timeout)

    def confirm(
        self, request: ConfirmRequest, *, timeout: float | None = None
    ) -> ConfirmResponse:
        return self.post_request("/Confirm", request, ConfirmResponse, timeout=timeout)

    def resend(self, *, timeout: float | None = None) -> ResendResponse:
        return self.post_request("/Resend", ResendRequest(), ResendResponse, timeout=timeout)

    def parse_notification(self, raw_body: bytes | str) -> Notification:
        return self._verifier.verify(raw_body)

    def notification_success_response(self) -> str:
        return self._verifier.success_response


class AsyncTinkoffClient:
    def __init__(
        self,
        terminal_key: str,
        password: str,
        *,
        base_url: str = API_V2_BASE_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._credentials = Credentials(terminal_key=terminal_key, password=password)
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._verifier = NotificationVerifier(password)

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> "AsyncTinkoffClient":
        return cls(
            settings.terminal_key,
            settings.password.get_secret_value(),
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def set_base_url(self, base_url: str) -> None:
        self._base_url = base_url.rstrip("/")

    async def post_request(
        self,
        path: str,
        request: SignableRequest,
        response_model: type[ResponseT],
        *,
        timeout: float | None = None,
    ) -> ResponseT:
        sign_request(self._credentials, request)
        payload = _encode_request(request)

        start = perf_counter()
        status_code = None
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout if timeout is None else timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(f"{self._base_url}{path}", json=payload)
            status_code = response.status_code
            result = _decode_response(response, response_model, path)
        except httpx.HTTPError as exc:
            error = _transport_error(exc, path)
            _log_request(path, start, status_code=status_code, error=error)
            raise error from exc
        except Exception as exc:
            _log_request(path, start, status_code=status_code, error=exc)
            raise

        _log_request(path, start, status_code=status_code, result=result)
        return result

    async def init(self, request: InitRequest, *, timeout: float | None = None) -> InitResponse:
        return await self.post_request("/Init", request, InitResponse, timeout=timeout)

    async def get_state(
        self, request: GetStateRequest, *, timeout: float | None = None
    ) -> GetStateResponse:
        return await self.post_request("/GetState", request, GetStateResponse, timeout=timeout)

    async def cancel(
        self, request: CancelRequest, *, timeout: float | None = None
    ) -> CancelResponse:
        return await self.post_request("/Cancel", request, CancelResponse, timeout=timeout)

    async def confirm(
        self, request: ConfirmRequest, *, timeout: float | None = None
    ) -> ConfirmResponse:
        return await self.post_request("/Confirm", request, ConfirmResponse, timeout=timeout)

    async def resend(self, *, timeout: float | None = None) -> ResendResponse:
        return await self.post_request(
            "/Resend", ResendRequest(), ResendResponse, timeout=timeout
        )

    def parse_notification(self, raw_body: bytes | str) -> Notification:
        return self._verifier.verify(raw_body)

    def notification_success_response(self) -> str:
        return self._verifier.success_response
