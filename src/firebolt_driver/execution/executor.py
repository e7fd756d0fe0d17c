"""Query submission with the one-shot recovery policy.

A call makes at most two attempts. The status of the first failure picks
the recovery step:

    401  session expired    -> drop the cached connection, try again
    404  engine not running -> start the engine, try again

Any other failure, and any failure of the second attempt, reaches the
caller unchanged.
"""

import time
from typing import Any, Dict, List, Optional, Sequence

from firebolt_driver.connection import ConnectionManager, EngineLifecycleGuard
from firebolt_driver.constants import ExecutionMode, OutputFormat
from firebolt_driver.logging import data_source_context, get_logger
from firebolt_driver.types.hydration import hydrate_row
from firebolt_driver.types.models import ColumnMeta, QueryResponse, RetryContext
from firebolt_driver.utils.decorators import traced

logger = get_logger(__name__)

UNAUTHORIZED = 401
NOT_FOUND = 404


def _status_of(exc: BaseException) -> Optional[int]:
    return getattr(exc, "status", None)


def _span_attributes(
    query: str,
    parameters: Optional[Sequence[Any]] = None,
    mode: ExecutionMode = ExecutionMode.BUFFERED,
) -> Dict[str, Any]:
    """Build OpenTelemetry span attributes for a query submission."""
    statement = (query or "").strip()
    if len(statement) > 4096:
        statement = f"{statement[:4093]}..."

    attributes: Dict[str, Any] = {
        "db.system": "firebolt",
        "db.operation": ExecutionMode(mode).value,
    }
    if statement:
        attributes["db.statement"] = statement
        attributes["db.statement.length"] = len(statement)
    if parameters:
        attributes["db.parameter.count"] = len(parameters)
    return attributes


class RetryableExecutor:
    """Runs one query against the managed connection, retrying once when
    the failure is recoverable."""

    def __init__(
        self,
        connections: ConnectionManager,
        lifecycle: EngineLifecycleGuard,
        data_source: Optional[str] = None,
    ):
        self._connections = connections
        self._lifecycle = lifecycle
        self.data_source = data_source

    @traced(
        span_name="firebolt.driver.execute",
        attribute_getter=lambda self, query, parameters=None, mode=ExecutionMode.BUFFERED: _span_attributes(
            query, parameters, mode
        ),
    )
    async def execute(
        self,
        query: str,
        parameters: Optional[Sequence[Any]] = None,
        mode: ExecutionMode = ExecutionMode.BUFFERED,
    ) -> QueryResponse:
        """Execute ``query`` and return its hydrated data and column metadata.

        Args:
            query: SQL text
            parameters: Positional query parameters
            mode: Buffered fetch or streaming fetch

        Returns:
            QueryResponse with a row list (buffered) or row iterator (stream)

        Raises:
            Exception: The engine client's error, unchanged, once recovery is
                exhausted or not applicable
        """
        with data_source_context(self.data_source):
            return await self._run_with_recovery(query, parameters, mode)

    async def _run_with_recovery(
        self,
        query: str,
        parameters: Optional[Sequence[Any]],
        mode: ExecutionMode,
    ) -> QueryResponse:
        retry = RetryContext()
        attempt = 0
        while True:
            attempt += 1
            start_time = time.time()
            payload = {"attempt": attempt, "mode": ExecutionMode(mode).value}
            try:
                response = await self._attempt(query, parameters, mode)
            except Exception as exc:
                status = _status_of(exc)
                logger.warning(
                    "Firebolt query attempt failed",
                    extra={
                        **payload,
                        "status": status,
                        "duration.seconds": f"{time.time() - start_time:.6f}",
                        "error": str(exc),
                    },
                )
                if status == UNAUTHORIZED and retry.consume():
                    self._connections.invalidate()
                    continue
                if status == NOT_FOUND and retry.consume():
                    await self._lifecycle.ensure_running()
                    continue
                raise

            logger.debug(
                "Firebolt query executed",
                extra={**payload, "duration.seconds": f"{time.time() - start_time:.6f}"},
            )
            return response

    async def _attempt(
        self,
        query: str,
        parameters: Optional[Sequence[Any]],
        mode: ExecutionMode,
    ) -> QueryResponse:
        connection = await self._connections.acquire()
        statement = await connection.execute(
            query,
            settings={"output_format": OutputFormat.JSON.value},
            parameters=parameters,
            hydrate_row=hydrate_row,
        )

        if mode == ExecutionMode.STREAM:
            row_stream, meta_awaitable = await statement.stream_result()
            meta = await meta_awaitable
            return QueryResponse(data=row_stream, meta=_as_column_meta(meta))

        data, meta = await statement.fetch_result()
        return QueryResponse(data=list(data), meta=_as_column_meta(meta))


def _as_column_meta(meta: Sequence[Any]) -> List[ColumnMeta]:
    return [
        column if isinstance(column, ColumnMeta) else ColumnMeta(name=column.name, type=column.type)
        for column in meta
    ]
