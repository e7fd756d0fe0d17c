"""Firebolt driver: the surface the query-orchestration layer talks to.

Example:
    >>> async with FireboltDriver(data_source="reporting") as driver:
    ...     rows = await driver.query("SELECT id, amount FROM orders WHERE id = ?", [42])
    ...     table = await driver.stream("SELECT * FROM events", [])
    ...     async for row in table.row_stream:
    ...         handle(row)
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Sequence

from firebolt_driver.common.exceptions import (
    configuration_error,
    timeout_error,
    unsupported_operation_error,
)
from firebolt_driver.connection import ConnectionManager, EngineLifecycleGuard
from firebolt_driver.constants import DEFAULT_CONCURRENCY, DEFAULT_DATA_SOURCE, ExecutionMode
from firebolt_driver.execution import RetryableExecutor
from firebolt_driver.logging import data_source_context, get_logger
from firebolt_driver.protocols import EngineClient
from firebolt_driver.settings import FireboltSettings, get_settings
from firebolt_driver.types import mapping
from firebolt_driver.types.models import (
    ColumnMeta,
    ColumnType,
    DownloadQueryResults,
    Row,
    StreamTableData,
    TableColumn,
)

logger = get_logger(__name__)


class FireboltDriver:
    """Runs SQL on a Firebolt engine over one lazily opened connection.

    Args:
        config: Overrides merged over the data source settings:
            ``read_only``, ``api_endpoint`` and a partial ``connection``
            mapping (``auth``, ``database``, ``account``, ``engine_name``,
            ``engine_endpoint``, ``additional_parameters``).
        data_source: Logical data source whose settings are loaded.
        max_pool_size: Pool size hint for the orchestration layer.
        test_connection_timeout: Seconds allowed for :meth:`test_connection`.
            Defaults to two minutes so a stopped engine can start.
        client: Engine client to use. Defaults to the firebolt-sdk adapter.
        settings: Pre-loaded settings, bypassing the environment.
    """

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        *,
        data_source: Optional[str] = None,
        max_pool_size: Optional[int] = None,
        test_connection_timeout: Optional[float] = None,
        client: Optional[EngineClient] = None,
        settings: Optional[FireboltSettings] = None,
    ):
        self.data_source = data_source or DEFAULT_DATA_SOURCE
        self.settings = settings or get_settings(self.data_source)
        self.config = self.settings.to_driver_config(config)
        self.max_pool_size = max_pool_size or self.settings.max_pool_size
        self.test_connection_timeout = test_connection_timeout or self.settings.test_connection_timeout

        self._client = client or self._create_default_client()
        self._lifecycle = EngineLifecycleGuard(self._client, self.config.connection.engine_name)
        self._connections = ConnectionManager(self._client, self.config.connection, self._lifecycle)
        self._executor = RetryableExecutor(self._connections, self._lifecycle, self.data_source)

    @classmethod
    def get_default_concurrency(cls) -> int:
        return DEFAULT_CONCURRENCY

    def _create_default_client(self) -> EngineClient:
        try:
            from firebolt_driver.clients.firebolt_sdk import FireboltSdkClient
        except ImportError as exc:
            raise configuration_error(
                "firebolt-sdk is not installed; install firebolt-driver[sdk] or pass a client",
                config_key="client",
                cause=exc,
            ) from exc
        return FireboltSdkClient(api_endpoint=self.config.api_endpoint)

    async def __aenter__(self) -> "FireboltDriver":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.release()

    # Query execution

    async def query(self, query: str, parameters: Optional[Sequence[Any]] = None) -> List[Row]:
        """Run ``query`` and return every hydrated row."""
        response = await self._executor.execute(query, parameters, ExecutionMode.BUFFERED)
        return response.data  # type: ignore[return-value]

    async def stream(self, query: str, parameters: Optional[Sequence[Any]] = None) -> StreamTableData:
        """Run ``query`` and return a single-pass row iterator with column types.

        Column types are resolved once, when the stream starts.
        """
        response = await self._executor.execute(query, parameters, ExecutionMode.STREAM)
        return StreamTableData(
            row_stream=response.data,  # type: ignore[arg-type]
            types=self._column_types(response.meta),
        )

    async def download_query_results(
        self,
        query: str,
        parameters: Optional[Sequence[Any]] = None,
    ) -> DownloadQueryResults:
        response = await self._executor.execute(query, parameters, ExecutionMode.BUFFERED)
        return DownloadQueryResults(
            rows=response.data,  # type: ignore[arg-type]
            types=self._column_types(response.meta),
        )

    async def test_connection(self) -> None:
        """Open (or reuse) the connection and ask the engine to validate it.

        No recovery is attempted here: any failure is logged and re-raised.

        Raises:
            DriverError: With TIMEOUT_ERROR if validation exceeds
                ``test_connection_timeout``
        """
        try:
            await asyncio.wait_for(self._validate_connection(), timeout=self.test_connection_timeout)
        except asyncio.TimeoutError as exc:
            logger.error(
                "Firebolt connection test timed out",
                extra={"timeout.seconds": self.test_connection_timeout},
            )
            raise timeout_error(
                f"Connection test timed out after {self.test_connection_timeout} seconds",
                timeout_seconds=self.test_connection_timeout,
                cause=exc,
            ) from exc
        except Exception as exc:
            logger.error(
                "Firebolt connection test failed",
                extra={"data_source": self.data_source, "error": str(exc)},
                exc_info=True,
            )
            raise

    async def _validate_connection(self) -> None:
        with data_source_context(self.data_source):
            connection = await self._connections.acquire()
            await connection.test_connection()

    async def release(self) -> None:
        """Destroy the current connection, if any. Idempotent."""
        await self._connections.release()

    # Introspection and DDL

    async def get_tables_query(self) -> List[Dict[str, Any]]:
        rows = await self.query("SHOW TABLES", [])
        return [{"table_name": row.get("table_name")} for row in rows]

    async def table_column_types(self, table: str) -> List[ColumnType]:
        rows = await self.query(f"DESCRIBE {table}", [])
        return [
            ColumnType(name=row["column_name"], type=self.to_generic_type(row["data_type"]))
            for row in rows
        ]

    def create_table_sql(self, quoted_table_name: str, columns: Sequence[TableColumn]) -> str:
        cols = ", ".join(
            f"{self.quote_identifier(column.name)} {self.from_generic_type(column.type)}"
            for column in columns
        )
        return f"CREATE DIMENSION TABLE {quoted_table_name} ({cols})"

    async def drop_table(self, table_name: str) -> List[Row]:
        """Drop a table; a schema qualifier is dropped from the name first."""
        if "." in table_name:
            table_name = table_name.split(".")[1]
        return await self.query(f"DROP TABLE {table_name}", [])

    async def create_schema_if_not_exists(self, schema_name: str) -> None:
        # Firebolt has no schemas to create
        return None

    async def unload(self, *args: Any, **kwargs: Any) -> None:
        raise unsupported_operation_error("unload")

    async def is_unload_supported(self) -> bool:
        return False

    # Types and identifiers

    def to_generic_type(self, column_type: str) -> str:
        return mapping.to_generic_type(column_type)

    def from_generic_type(self, column_type: str) -> str:
        return mapping.from_generic_type(column_type)

    def _column_types(self, meta: Sequence[ColumnMeta]) -> List[ColumnType]:
        return [ColumnType(name=column.name, type=self.to_generic_type(column.type)) for column in meta]

    def quote_identifier(self, identifier: str) -> str:
        """Wrap in double quotes. Embedded quotes are not escaped."""
        return f'"{identifier}"'

    def read_only(self) -> bool:
        return bool(self.config.read_only)
