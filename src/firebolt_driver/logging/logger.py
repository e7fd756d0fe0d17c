"""JSON log output for the driver.

Only the ``firebolt_driver`` logger tree is configured, so embedding the
driver never reconfigures the host application's root logger. Records are
emitted as one JSON object per line and carry the active OpenTelemetry
trace and span ids when a span is recording the query.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Union

from opentelemetry import trace

DRIVER_LOGGER_NAME = "firebolt_driver"

# Attributes every LogRecord has; anything else arrived through ``extra``
_STANDARD_ATTRIBUTES: FrozenSet[str] = frozenset(
    logging.makeLogRecord({}).__dict__
) | {"asctime", "message"}


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _trace_fields() -> Dict[str, str]:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return {}
    return {
        "trace_id": trace.format_trace_id(span_context.trace_id),
        "span_id": trace.format_span_id(span_context.span_id),
    }


class CustomJsonFormatter(logging.Formatter):
    """Render a record as JSON: ``extra`` fields, then the fixed envelope."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRIBUTES
        }
        entry.update(
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
        )
        entry.update(_trace_fields())
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: Union[str, int] = "INFO") -> None:
    """Send driver logs to stdout as JSON lines.

    Args:
        level: Level name (``"debug"``, ``"INFO"``...) or numeric level.
    """
    level_name = logging.getLevelName(level) if isinstance(level, int) else level.upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "firebolt_json": {"()": CustomJsonFormatter},
        },
        "filters": {
            "firebolt_context": {"()": "firebolt_driver.logging.filters.ContextFilter"},
        },
        "handlers": {
            "firebolt_stdout": {
                "class": "logging.StreamHandler",
                "formatter": "firebolt_json",
                "filters": ["firebolt_context"],
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {
            DRIVER_LOGGER_NAME: {
                "level": level_name,
                "handlers": ["firebolt_stdout"],
                "propagate": False,
            }
        },
    })
