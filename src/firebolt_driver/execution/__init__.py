"""Query execution with the driver's recovery policy."""

from .executor import RetryableExecutor

__all__ = ["RetryableExecutor"]
