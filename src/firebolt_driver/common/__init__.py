"""Common exceptions for the Firebolt driver.

Exception Design:
    The exception system uses error codes for categorization rather than
    numerous specific exception classes. All exceptions inherit from
    DriverError and include structured error information. Errors coming
    back from the engine client are EngineClientError instances whose
    ``status`` drives the driver's retry decisions.
"""

from firebolt_driver.common.exceptions import (
    DriverError,
    EngineClientError,
    ErrorCode,
    # Helper functions
    configuration_error,
    engine_client_error,
    timeout_error,
    unsupported_operation_error,
)

__all__ = [
    "DriverError",
    "EngineClientError",
    "ErrorCode",
    "configuration_error",
    "engine_client_error",
    "timeout_error",
    "unsupported_operation_error",
]
