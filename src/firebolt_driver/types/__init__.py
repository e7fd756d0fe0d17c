"""Types for the Firebolt driver: records, type mapping and row hydration."""

from firebolt_driver.types.base import DriverBaseModel
from firebolt_driver.types.hydration import hydrate_row, hydrate_value, is_number_type
from firebolt_driver.types.mapping import (
    COMPLEX_TYPE,
    DB_TYPE_TO_GENERIC,
    FIREBOLT_TYPE_TO_GENERIC,
    base_to_generic_type,
    from_generic_type,
    to_generic_type,
)
from firebolt_driver.types.models import (
    Auth,
    ClientCredentialsAuth,
    ColumnMeta,
    ColumnType,
    ConnectionConfig,
    DownloadQueryResults,
    DriverConfig,
    QueryResponse,
    RetryContext,
    Row,
    StreamTableData,
    TableColumn,
    UsernamePasswordAuth,
)

__all__ = [
    "DriverBaseModel",
    "Auth",
    "ClientCredentialsAuth",
    "ColumnMeta",
    "ColumnType",
    "ConnectionConfig",
    "DownloadQueryResults",
    "DriverConfig",
    "QueryResponse",
    "RetryContext",
    "Row",
    "StreamTableData",
    "TableColumn",
    "UsernamePasswordAuth",
    "COMPLEX_TYPE",
    "DB_TYPE_TO_GENERIC",
    "FIREBOLT_TYPE_TO_GENERIC",
    "base_to_generic_type",
    "from_generic_type",
    "to_generic_type",
    "hydrate_row",
    "hydrate_value",
    "is_number_type",
]
