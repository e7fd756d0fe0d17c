"""Constants module for the Firebolt driver.

This module has no dependencies on other driver modules.
"""

from firebolt_driver.constants.driver import (
    DEFAULT_API_ENDPOINT,
    DEFAULT_CONCURRENCY,
    DEFAULT_DATA_SOURCE,
    DEFAULT_TEST_CONNECTION_TIMEOUT,
    USER_CLIENT_NAME,
    ExecutionMode,
    OutputFormat,
)

__all__ = [
    "DEFAULT_API_ENDPOINT",
    "DEFAULT_CONCURRENCY",
    "DEFAULT_DATA_SOURCE",
    "DEFAULT_TEST_CONNECTION_TIMEOUT",
    "USER_CLIENT_NAME",
    "ExecutionMode",
    "OutputFormat",
]
