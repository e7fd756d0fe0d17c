"""Firebolt driver for the query-orchestration layer.

Runs SQL against a Firebolt engine over a single lazily opened connection,
starting the engine and refreshing the session when the engine asks for it.

Example usage:
    ```python
    import asyncio
    from firebolt_driver import FireboltDriver

    async def main():
        async with FireboltDriver(data_source="reporting") as driver:
            await driver.test_connection()
            rows = await driver.query("SELECT * FROM orders WHERE id = ?", [42])

    asyncio.run(main())
    ```
"""

from firebolt_driver.__version__ import __version__
from firebolt_driver.common.exceptions import DriverError, EngineClientError, ErrorCode
from firebolt_driver.constants import ExecutionMode
from firebolt_driver.driver import FireboltDriver
from firebolt_driver.types.models import (
    ColumnMeta,
    ColumnType,
    ConnectionConfig,
    DownloadQueryResults,
    DriverConfig,
    StreamTableData,
    TableColumn,
)

__all__ = [
    "__version__",
    "FireboltDriver",
    "DriverError",
    "EngineClientError",
    "ErrorCode",
    "ExecutionMode",
    "ColumnMeta",
    "ColumnType",
    "ConnectionConfig",
    "DownloadQueryResults",
    "DriverConfig",
    "StreamTableData",
    "TableColumn",
]
