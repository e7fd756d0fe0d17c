"""Protocol definitions for the Firebolt driver.

Protocols provide type-safe interfaces without requiring inheritance,
following Python's structural subtyping (duck typing with type hints).
"""

from .client import EngineClient, EngineConnection, EngineHandle, EngineStatement, HydrateRow

__all__ = [
    "EngineClient",
    "EngineConnection",
    "EngineHandle",
    "EngineStatement",
    "HydrateRow",
]
