"""Engine client protocol definitions.

These protocols describe the capabilities the driver consumes from the
engine client library. Any object with matching methods can be injected,
which is how tests substitute a fake client for the network one.
"""

from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    runtime_checkable,
)

from firebolt_driver.types.models import ColumnMeta, ConnectionConfig, Row

HydrateRow = Callable[[Mapping[str, Any], Sequence[ColumnMeta]], Row]


@runtime_checkable
class EngineStatement(Protocol):
    """A submitted statement whose result can be fetched once."""

    async def fetch_result(self) -> Tuple[List[Row], List[ColumnMeta]]:
        """Materialize every row along with the column metadata."""
        ...

    async def stream_result(self) -> Tuple[AsyncIterator[Row], Awaitable[List[ColumnMeta]]]:
        """Start streaming rows.

        Returns:
            The row iterator and an awaitable resolving to the column
            metadata once the engine has sent it.
        """
        ...


@runtime_checkable
class EngineConnection(Protocol):
    """An authenticated session with the engine."""

    async def test_connection(self) -> None:
        ...

    async def execute(
        self,
        query: str,
        *,
        settings: Mapping[str, Any],
        parameters: Optional[Sequence[Any]],
        hydrate_row: HydrateRow,
    ) -> EngineStatement:
        """Submit a statement; ``hydrate_row`` is applied to every decoded row."""
        ...

    async def destroy(self) -> None:
        ...


@runtime_checkable
class EngineHandle(Protocol):
    """A named engine known to the engine-management API."""

    async def start_and_wait(self) -> None:
        """Start the engine if needed and wait until it reports running."""
        ...


@runtime_checkable
class EngineClient(Protocol):
    """Entry point of the engine client library.

    Errors raised by any method may carry a numeric ``status`` attribute.
    """

    async def connect(self, config: ConnectionConfig) -> EngineConnection:
        ...

    async def get_engine_by_name(self, name: str) -> EngineHandle:
        ...
