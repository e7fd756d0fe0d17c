"""Records exchanged between the driver, the engine client and callers."""

from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional, Union

from pydantic import Field, SecretStr

from firebolt_driver.constants import DEFAULT_API_ENDPOINT
from firebolt_driver.types.base import DriverBaseModel

Row = Dict[str, Any]


class UsernamePasswordAuth(DriverBaseModel):
    """Legacy user credentials, selected when the user name is an e-mail."""
    username: str
    password: SecretStr


class ClientCredentialsAuth(DriverBaseModel):
    """Service account credentials."""
    client_id: str
    client_secret: SecretStr


Auth = Union[UsernamePasswordAuth, ClientCredentialsAuth]


class ConnectionConfig(DriverBaseModel):
    """Everything the engine client needs to open an authenticated session."""
    auth: Auth
    database: Optional[str] = None
    account: Optional[str] = None
    engine_name: Optional[str] = None
    # Deprecated in favour of engine_name + account
    engine_endpoint: Optional[str] = None
    additional_parameters: Dict[str, Any] = Field(default_factory=dict)


class DriverConfig(DriverBaseModel):
    """Driver-wide configuration, built once at construction."""
    read_only: bool = True
    api_endpoint: str = DEFAULT_API_ENDPOINT
    connection: ConnectionConfig


class ColumnMeta(DriverBaseModel):
    """Column name and engine-native type as reported with a result set."""
    name: str
    type: str


class ColumnType(DriverBaseModel):
    """Column name and generic type."""
    name: str
    type: str


class TableColumn(DriverBaseModel):
    """Column definition used to generate CREATE TABLE statements."""
    name: str
    type: str


@dataclass
class QueryResponse:
    """Raw engine response after hydration.

    ``data`` is a list of rows for buffered execution and an async iterator
    of rows for streamed execution.
    """
    data: Union[List[Row], AsyncIterator[Row]]
    meta: List[ColumnMeta] = field(default_factory=list)


@dataclass
class StreamTableData:
    """Streamed result: single-pass row iterator plus fixed column types."""
    row_stream: AsyncIterator[Row]
    types: List[ColumnType]


@dataclass
class DownloadQueryResults:
    rows: List[Row]
    types: List[ColumnType]


@dataclass
class RetryContext:
    """Tracks whether the current call may still make its single retry."""
    allowed: bool = True

    def consume(self) -> bool:
        """Use up the retry. Returns whether it was still available."""
        available = self.allowed
        self.allowed = False
        return available
