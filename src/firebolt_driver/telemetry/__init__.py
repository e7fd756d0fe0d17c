"""OpenTelemetry helpers for instrumentation."""

from typing import Optional

from opentelemetry import trace

__all__ = [
    "get_tracer",
]


def get_tracer(name: str, version: Optional[str] = None):
    """Return a tracer from the active OpenTelemetry provider."""
    return trace.get_tracer(name, version)
