"""Logging filters for context injection.

This module provides filters that inject context variables into log records,
enabling correlation of driver logs with the calling request and data source.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional

from firebolt_driver.__version__ import __version__

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
data_source_var: ContextVar[Optional[str]] = ContextVar("data_source", default=None)

_static_context: Dict[str, Any] = {}


class ContextFilter(logging.Filter):
    """Logging filter that adds context variables to log records.

    This filter extracts values from context variables and adds them to
    log records, enabling log correlation across async operations.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context variables to the log record.

        Args:
            record: Log record to enhance

        Returns:
            Always True (doesn't filter out any records)
        """
        for key, value in _static_context.items():
            setattr(record, key, value)
        setattr(record, "request_id", request_id_var.get())
        setattr(record, "data_source", data_source_var.get())
        setattr(record, "sdk_name", "firebolt-driver")
        setattr(record, "driver_version", __version__)

        return True


def set_logging_context(
    environment: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """Replace the static fields stamped on every record."""
    _static_context.clear()
    if environment is not None:
        _static_context["environment"] = environment
    if extra:
        _static_context.update(extra)


def set_request_context(
    request_id: Optional[str] = None,
    data_source: Optional[str] = None,
) -> None:
    """Set request context variables."""
    if request_id is not None:
        request_id_var.set(request_id)
    if data_source is not None:
        data_source_var.set(data_source)


def clear_request_context() -> None:
    """Clear all request context variables."""
    request_id_var.set(None)
    data_source_var.set(None)


@contextmanager
def data_source_context(data_source: Optional[str]) -> Iterator[None]:
    """Tag records logged inside the block with ``data_source``.

    The previous value is restored on exit, so nested driver calls on
    different data sources do not leak into each other.
    """
    token = data_source_var.set(data_source)
    try:
        yield
    finally:
        data_source_var.reset(token)
