import inspect
import logging
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from tinkoff_sdk.errors import SerializationError, SignatureVerificationError
from tinkoff_sdk.notifications import Notification, NotificationVerifier

NotificationHandler = Callable[[Notification], Awaitable[None] | None]

logger = logging.getLogger("tinkoff.http")


def create_notification_router(
    verifier: NotificationVerifier,
    handler: NotificationHandler,
    *,
    path: str = "/notifications",
) -> APIRouter:
    """
    Build a router receiving bank notifications on ``path``.

    ``handler`` only ever sees verified notifications. The bank treats any
    reply other than the plain ``OK`` body as a failed delivery and retries.
    """
    router = APIRouter(tags=["tinkoff"])

    @router.post(path, response_class=PlainTextResponse)
    async def receive_notification(request: Request) -> PlainTextResponse:
        raw_body = await request.body()
        try:
            notification = verifier.verify(raw_body)
        except SignatureVerificationError as exc:
            raise HTTPException(status_code=403, detail=exc.to_dict()) from exc
        except SerializationError as exc:
            raise HTTPException(status_code=400, detail={"error": exc.message}) from exc

        outcome = handler(notification)
        if inspect.isawaitable(outcome):
            await outcome

        logger.info(
            "notification_acknowledged",
            extra={
                "event_name": "notification_acknowledged",
                "path": path,
                "method": "POST",
                "payment_id": notification.payment_id,
                "status": notification.status,
            },
        )
        return PlainTextResponse(verifier.success_response)

    return router
