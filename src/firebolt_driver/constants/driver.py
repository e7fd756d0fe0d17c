"""Driver-related constants and enumerations."""

from enum import Enum


DEFAULT_API_ENDPOINT = "api.app.firebolt.io"

# Long enough for a stopped engine to cold-start during validation
DEFAULT_TEST_CONNECTION_TIMEOUT = 120.0

DEFAULT_CONCURRENCY = 10

USER_CLIENT_NAME = "CubeDev+Cube"

DEFAULT_DATA_SOURCE = "default"


class ExecutionMode(str, Enum):
    """How a statement's result is fetched from the engine.

    Values:
        BUFFERED: Materialize every row before returning.
        STREAM: Return a forward-only async iterator over rows; column
            metadata is awaited once when the stream starts.
    """

    BUFFERED = "buffered"
    STREAM = "stream"


class OutputFormat(str, Enum):
    """Result serialization requested from the engine."""

    JSON = "JSON"
