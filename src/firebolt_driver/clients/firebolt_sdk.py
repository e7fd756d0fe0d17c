"""Engine client backed by the ``firebolt-sdk`` package.

Adapts the SDK's DB-API style async connection and its synchronous
engine-management API to the driver's engine client protocols. Errors
that carry an HTTP status are re-raised as EngineClientError so the driver
can recognise expired sessions (401) and stopped engines (404).
"""

import asyncio
import datetime
import decimal
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence, Tuple

from firebolt.async_db import connect as firebolt_connect
from firebolt.client.auth import ClientCredentials, UsernamePassword
from firebolt.service.manager import ResourceManager

from firebolt_driver.common.exceptions import EngineClientError, engine_client_error
from firebolt_driver.constants import DEFAULT_API_ENDPOINT
from firebolt_driver.logging import get_logger
from firebolt_driver.protocols import HydrateRow
from firebolt_driver.types.models import (
    ClientCredentialsAuth,
    ColumnMeta,
    ConnectionConfig,
    Row,
    UsernamePasswordAuth,
)

logger = get_logger(__name__)

_PYTHON_TYPE_NAMES: Dict[type, str] = {
    bool: "boolean",
    int: "long",
    float: "double",
    str: "text",
    bytes: "bytea",
    decimal.Decimal: "decimal",
    datetime.datetime: "timestamp",
    datetime.date: "date",
}


def native_type_name(type_code: Any) -> str:
    """Render an SDK column type code as a Firebolt type name."""
    subtype = getattr(type_code, "subtype", None)
    if subtype is not None:
        return f"array({native_type_name(subtype)})"
    precision = getattr(type_code, "precision", None)
    scale = getattr(type_code, "scale", None)
    if precision is not None and scale is not None:
        return f"decimal({precision}, {scale})"
    if isinstance(type_code, type) and type_code in _PYTHON_TYPE_NAMES:
        return _PYTHON_TYPE_NAMES[type_code]
    return str(type_code)


def _status_of(exc: BaseException) -> Optional[int]:
    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(getattr(exc, "response", None), "status_code", None)
    return status if isinstance(status, int) else None


@asynccontextmanager
async def translate_errors(query: Optional[str] = None):
    """Re-raise SDK errors with an HTTP status as EngineClientError."""
    try:
        yield
    except EngineClientError:
        raise
    except Exception as exc:
        status = _status_of(exc)
        if status is None:
            raise
        raise engine_client_error(str(exc), status=status, query=query, cause=exc) from exc


def _to_sdk_auth(auth: Any) -> Any:
    if isinstance(auth, UsernamePasswordAuth):
        return UsernamePassword(auth.username, auth.password.get_secret_value())
    if isinstance(auth, ClientCredentialsAuth):
        return ClientCredentials(auth.client_id, auth.client_secret.get_secret_value())
    return auth


class SdkStatement:
    """Result of one executed statement on an SDK cursor."""

    def __init__(self, cursor: Any, hydrate_row: HydrateRow, query: str, batch_size: int = 1000):
        self._cursor = cursor
        self._hydrate_row = hydrate_row
        self._query = query
        self.batch_size = batch_size

    def _meta(self) -> List[ColumnMeta]:
        return [
            ColumnMeta(name=column.name, type=native_type_name(column.type_code))
            for column in (self._cursor.description or [])
        ]

    def _hydrate(self, row: Sequence[Any], meta: List[ColumnMeta]) -> Row:
        return self._hydrate_row(dict(zip((column.name for column in meta), row)), meta)

    async def fetch_result(self) -> Tuple[List[Row], List[ColumnMeta]]:
        meta = self._meta()
        async with translate_errors(self._query):
            rows = await self._cursor.fetchall()
        return [self._hydrate(row, meta) for row in rows or []], meta

    async def stream_result(self) -> Tuple[AsyncIterator[Row], "asyncio.Future[List[ColumnMeta]]"]:
        meta = self._meta()
        meta_future: "asyncio.Future[List[ColumnMeta]]" = asyncio.get_running_loop().create_future()
        meta_future.set_result(meta)
        return self._iter_rows(meta), meta_future

    async def _iter_rows(self, meta: List[ColumnMeta]) -> AsyncIterator[Row]:
        while True:
            async with translate_errors(self._query):
                batch = await self._cursor.fetchmany(self.batch_size)
            if not batch:
                return
            for row in batch:
                yield self._hydrate(row, meta)


class SdkConnection:
    """EngineConnection over an SDK async connection.

    The SDK negotiates the result format itself, so the ``settings`` passed
    to :meth:`execute` are only logged.
    """

    def __init__(self, connection: Any):
        self._connection = connection

    async def test_connection(self) -> None:
        async with translate_errors("SELECT 1"):
            cursor = self._connection.cursor()
            await cursor.execute("SELECT 1")

    async def execute(
        self,
        query: str,
        *,
        settings: Mapping[str, Any],
        parameters: Optional[Sequence[Any]],
        hydrate_row: HydrateRow,
    ) -> SdkStatement:
        logger.debug("Executing statement", extra={"settings": dict(settings)})
        async with translate_errors(query):
            cursor = self._connection.cursor()
            await cursor.execute(query, list(parameters) if parameters else None)
        return SdkStatement(cursor, hydrate_row, query)

    async def destroy(self) -> None:
        await self._connection.aclose()


class SdkEngine:
    """EngineHandle over an SDK engine object, whose calls are blocking."""

    def __init__(self, engine: Any):
        self._engine = engine

    async def start_and_wait(self) -> None:
        # SDK start() returns once the engine reports running
        async with translate_errors():
            await asyncio.to_thread(self._engine.start)


class FireboltSdkClient:
    """EngineClient implementation using firebolt-sdk."""

    def __init__(self, api_endpoint: str = DEFAULT_API_ENDPOINT):
        self.api_endpoint = api_endpoint
        self._config: Optional[ConnectionConfig] = None

    def _connect_kwargs(self, config: ConnectionConfig) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "auth": _to_sdk_auth(config.auth),
            "account_name": config.account,
            "database": config.database,
            "api_endpoint": self.api_endpoint,
        }
        if config.engine_name:
            kwargs["engine_name"] = config.engine_name
        elif config.engine_endpoint:
            kwargs["engine_url"] = config.engine_endpoint

        user_clients = config.additional_parameters.get("user_clients") or []
        if user_clients:
            kwargs["additional_parameters"] = {
                "user_clients": [(client["name"], client["version"]) for client in user_clients],
            }
        return {key: value for key, value in kwargs.items() if value is not None}

    async def connect(self, config: ConnectionConfig) -> SdkConnection:
        self._config = config
        async with translate_errors():
            connection = await firebolt_connect(**self._connect_kwargs(config))
        return SdkConnection(connection)

    async def get_engine_by_name(self, name: str) -> SdkEngine:
        if self._config is None:
            raise engine_client_error("Engine lookup requires a connection configuration")
        manager_kwargs = {
            "auth": _to_sdk_auth(self._config.auth),
            "account_name": self._config.account,
            "api_endpoint": self.api_endpoint,
        }

        def _lookup() -> Any:
            manager = ResourceManager(**{k: v for k, v in manager_kwargs.items() if v is not None})
            return manager.engines.get(name)

        async with translate_errors():
            engine = await asyncio.to_thread(_lookup)
        return SdkEngine(engine)
