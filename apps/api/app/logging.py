from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from app.context import get_correlation_id, get_log_context


# Extra attributes copied into the JSON "fields" object; anything else passed via
# ``extra`` is dropped from the output.
LOGGED_FIELDS = frozenset(
    {
        "method",
        "path",
        "status_code",
        "duration_ms",
        "tenant_id",
        "module_key",
        "module_keys",
        "event_type",
        "classification_code",
        "template",
        "source",
        "source_count",
        "pipeline",
        "status",
        "error",
    }
)
MAX_ERROR_LENGTH = 500

_default_record_factory = logging.getLogRecordFactory()


def _record_with_correlation_id(*args: Any, **kwargs: Any) -> logging.LogRecord:
    record = _default_record_factory(*args, **kwargs)
    record.correlation_id = get_correlation_id()
    return record


class RequestContextFilter(logging.Filter):
    """Fills ``correlation_id`` and ``tenant_id`` from the current request when unset."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, value in get_log_context().items():
            if not getattr(record, name, None):
                setattr(record, name, value)
        return True


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = {
            key: value
            for key, value in record.__dict__.items()
            if key in LOGGED_FIELDS and value is not None
        }
        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)
        if isinstance(fields.get("error"), str):
            fields["error"] = fields["error"][:MAX_ERROR_LENGTH]

        return json.dumps(
            {
                "ts": datetime.now(timezone.utc).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
                "correlation_id": getattr(record, "correlation_id", None),
                "fields": fields,
            },
            default=str,
        )


def configure_logging(level: str = "INFO") -> None:
    root_logger = logging.getLogger()
    if getattr(root_logger, "_crm_config_configured", False):
        return

    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(resolved)
    handler.setFormatter(JsonLogFormatter())
    handler.addFilter(RequestContextFilter())

    root_logger.handlers.clear()
    root_logger.filters.clear()
    root_logger.setLevel(resolved)
    logging.setLogRecordFactory(_record_with_correlation_id)
    root_logger.addHandler(handler)
    root_logger._crm_config_configured = True  # type: ignore[attr-defined]
