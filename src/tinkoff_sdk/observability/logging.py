import json
import logging
from datetime import UTC, datetime
from typing import Any

from tinkoff_sdk.config import Settings

SDK_LOGGER_NAME = "tinkoff"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

_configured_loggers: set[str] = set()


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record with the SDK's structured ``extra=`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _RECORD_ATTRIBUTES or key.startswith("_") or value is None:
                continue
            payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str)


def configure_logging(
    settings: Settings | None = None,
    *,
    logger_name: str = SDK_LOGGER_NAME,
    force: bool = False,
) -> logging.Logger:
    """
    Attach a JSON stream handler to the SDK's logger tree.

    Only ``tinkoff.*`` loggers are touched, so the host application's root
    logging stays as it is. Records stop at this logger.
    """
    sdk_logger = logging.getLogger(logger_name)
    if logger_name in _configured_loggers and not force:
        return sdk_logger

    settings = settings or Settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        sdk_logger.warning(
            "invalid_log_level_fallback",
            extra={
                "event_name": "invalid_log_level_fallback",
                "configured_level": settings.log_level,
            },
        )
        level = logging.INFO

    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter())
    sdk_logger.handlers = [handler]
    sdk_logger.setLevel(level)
    sdk_logger.propagate = False

    _configured_loggers.add(logger_name)
    return sdk_logger
