from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for driver operations.

    Error codes categorize failures without a class per failure. Each
    category has its own prefix so codes can be grouped in logs.

    Attributes:
        CONFIG_*: Configuration errors
        CONNECTION_*: Authentication and connection validation errors
        EXECUTION_*: Query execution errors
        ENGINE_*: Remote engine availability errors
        OPERATION_*: Operations the driver does not offer
    """
    # Configuration errors
    CONFIG_ERROR = "CONFIG_001"

    # Connection errors
    AUTH_ERROR = "CONNECTION_001"
    TIMEOUT_ERROR = "CONNECTION_002"

    # Execution errors
    QUERY_EXECUTION_ERROR = "EXECUTION_001"

    # Engine errors
    ENGINE_NOT_AVAILABLE = "ENGINE_001"

    # Operation errors
    OPERATION_ERROR = "OPERATION_001"
    OPERATION_NOT_SUPPORTED = "OPERATION_002"


class DriverError(Exception):
    """Base exception for all driver errors.

    Uses error codes for categorization instead of numerous specific
    exception classes.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
        is_retryable: Whether the error is transient and can be retried
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.OPERATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        is_retryable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.is_retryable = is_retryable

        # Lazy import to avoid circular dependency
        from firebolt_driver.logging import get_logger
        logger = get_logger(__name__)
        logger.debug(
            message,
            extra={
                "error_code": error_code.value,
                "details": self.details,
                "is_retryable": is_retryable,
            },
        )

    def __str__(self) -> str:
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
            "is_retryable": self.is_retryable
        }


class EngineClientError(DriverError):
    """Error reported by the engine client, carrying the engine's status code.

    Only the status code is interpreted by the driver: 401 means the session
    is stale, 404 means the engine is not running. Everything else is opaque.
    """

    def __init__(self, message: str, status: Optional[int] = None, **kwargs):
        self.status = status
        details = dict(kwargs.pop("details", None) or {})
        if status is not None:
            details["status"] = status
        kwargs.setdefault("error_code", _error_code_for_status(status))
        kwargs.setdefault("is_retryable", status in (401, 404))
        super().__init__(message, details=details, **kwargs)


def _error_code_for_status(status: Optional[int]) -> ErrorCode:
    if status == 401:
        return ErrorCode.AUTH_ERROR
    if status == 404:
        return ErrorCode.ENGINE_NOT_AVAILABLE
    return ErrorCode.QUERY_EXECUTION_ERROR


# Helper functions for common error scenarios
def configuration_error(
    message: str,
    config_key: Optional[str] = None,
    **kwargs
) -> DriverError:
    """Create a configuration error.

    Args:
        message: Error message
        config_key: Configuration key that caused the error
        **kwargs: Additional error details

    Returns:
        DriverError with CONFIG_ERROR code
    """
    details = kwargs.get('details', {})
    if config_key:
        details["config_key"] = config_key

    return DriverError(
        message=message,
        error_code=ErrorCode.CONFIG_ERROR,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def timeout_error(
    message: str,
    timeout_seconds: Optional[float] = None,
    **kwargs
) -> DriverError:
    """Create a timeout error.

    Args:
        message: Error message
        timeout_seconds: The limit that was exceeded
        **kwargs: Additional error details

    Returns:
        DriverError with TIMEOUT_ERROR code
    """
    details = kwargs.get('details', {})
    if timeout_seconds is not None:
        details["timeout_seconds"] = timeout_seconds

    return DriverError(
        message=message,
        error_code=ErrorCode.TIMEOUT_ERROR,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def unsupported_operation_error(operation: str, **kwargs) -> DriverError:
    """Create an error for an operation the driver never supports.

    Args:
        operation: Name of the rejected operation
        **kwargs: Additional error details

    Returns:
        DriverError with OPERATION_NOT_SUPPORTED code
    """
    details = kwargs.get('details', {})
    details["operation"] = operation

    return DriverError(
        message=f"{operation.capitalize()} is not supported",
        error_code=ErrorCode.OPERATION_NOT_SUPPORTED,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def engine_client_error(
    message: str,
    status: Optional[int] = None,
    query: Optional[str] = None,
    **kwargs
) -> EngineClientError:
    """Create an engine client error with the engine's status code.

    Args:
        message: Error message
        status: Numeric status reported by the engine
        query: Query that failed (if applicable)
        **kwargs: Additional error details

    Returns:
        EngineClientError carrying ``status``
    """
    details = kwargs.get('details', {})
    if query:
        details["query"] = query[:500] + "..." if len(query) > 500 else query

    return EngineClientError(
        message,
        status=status,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )
