"""Utility decorators shared across the driver."""

from firebolt_driver.utils.decorators import traced

__all__ = ["traced"]
