"""Connection lifecycle: the shared connection slot and the engine start guard."""

from .lifecycle import EngineLifecycleGuard
from .manager import ConnectionManager

__all__ = [
    "ConnectionManager",
    "EngineLifecycleGuard",
]
