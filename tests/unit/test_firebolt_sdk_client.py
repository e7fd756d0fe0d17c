"""Tests for the firebolt-sdk adapter, with the SDK objects mocked."""

import datetime
import decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from firebolt_driver.clients.firebolt_sdk import (
    FireboltSdkClient,
    SdkConnection,
    SdkEngine,
    native_type_name,
    translate_errors,
)
from firebolt_driver.common import EngineClientError, ErrorCode
from firebolt_driver.types.hydration import hydrate_row
from firebolt_driver.types.models import (
    ClientCredentialsAuth,
    ConnectionConfig,
    UsernamePasswordAuth,
)


class _HttpError(Exception):
    def __init__(self, status_code):
        super().__init__(f"HTTP {status_code}")
        self.response = SimpleNamespace(status_code=status_code)


class TestNativeTypeName:

    @pytest.mark.parametrize(
        "type_code, expected",
        [
            (int, "long"),
            (float, "double"),
            (str, "text"),
            (bool, "boolean"),
            (datetime.date, "date"),
            (datetime.datetime, "timestamp"),
            (decimal.Decimal, "decimal"),
        ],
    )
    def test_python_types(self, type_code, expected):
        assert native_type_name(type_code) == expected

    def test_array_and_decimal_codes(self):
        assert native_type_name(SimpleNamespace(subtype=int)) == "array(long)"
        assert native_type_name(SimpleNamespace(precision=38, scale=2)) == "decimal(38, 2)"


class TestTranslateErrors:

    @pytest.mark.asyncio
    async def test_status_error_becomes_engine_client_error(self):
        with pytest.raises(EngineClientError) as exc_info:
            async with translate_errors("SELECT 1"):
                raise _HttpError(401)

        assert exc_info.value.status == 401
        assert exc_info.value.error_code == ErrorCode.AUTH_ERROR
        assert exc_info.value.details["query"] == "SELECT 1"

    @pytest.mark.asyncio
    async def test_errors_without_status_pass_through(self):
        error = RuntimeError("decode failed")

        with pytest.raises(RuntimeError) as exc_info:
            async with translate_errors():
                raise error

        assert exc_info.value is error


class TestSdkConnection:

    @pytest.fixture
    def cursor(self):
        cursor = MagicMock()
        cursor.execute = AsyncMock()
        cursor.description = [SimpleNamespace(name="id", type_code=int), SimpleNamespace(name="name", type_code=str)]
        cursor.fetchall = AsyncMock(return_value=[(1, "a"), (2, "b")])
        cursor.fetchmany = AsyncMock(side_effect=[[(1, "a")], [(2, "b")], []])
        return cursor

    @pytest.fixture
    def connection(self, cursor):
        sdk_connection = MagicMock()
        sdk_connection.cursor.return_value = cursor
        sdk_connection.aclose = AsyncMock()
        return SdkConnection(sdk_connection)

    @pytest.mark.asyncio
    async def test_fetch_result_hydrates_rows(self, connection, cursor):
        statement = await connection.execute(
            "SELECT id, name FROM t WHERE id > ?",
            settings={"output_format": "JSON"},
            parameters=[0],
            hydrate_row=hydrate_row,
        )
        rows, meta = await statement.fetch_result()

        cursor.execute.assert_awaited_once_with("SELECT id, name FROM t WHERE id > ?", [0])
        assert rows == [{"id": "1", "name": "a"}, {"id": "2", "name": "b"}]
        assert [column.type for column in meta] == ["long", "text"]

    @pytest.mark.asyncio
    async def test_stream_result_reads_batches(self, connection):
        statement = await connection.execute(
            "SELECT id, name FROM t", settings={}, parameters=None, hydrate_row=hydrate_row
        )
        row_stream, meta = await statement.stream_result()

        assert [row async for row in row_stream] == [{"id": "1", "name": "a"}, {"id": "2", "name": "b"}]
        assert [column.name for column in await meta] == ["id", "name"]

    @pytest.mark.asyncio
    async def test_destroy_closes_sdk_connection(self, connection):
        await connection.destroy()

        connection._connection.aclose.assert_awaited_once()


class TestFireboltSdkClient:

    def test_connect_kwargs_for_client_credentials(self):
        client = FireboltSdkClient(api_endpoint="api.app.firebolt.io")
        config = ConnectionConfig(
            auth=ClientCredentialsAuth(client_id="id", client_secret="secret"),
            database="db",
            account="acme",
            engine_name="eng",
            engine_endpoint="ignored.firebolt.io",
            additional_parameters={"user_clients": [{"name": "CubeDev+Cube", "version": "1.0"}]},
        )

        kwargs = client._connect_kwargs(config)

        assert kwargs["engine_name"] == "eng"
        assert "engine_url" not in kwargs
        assert kwargs["account_name"] == "acme"
        assert kwargs["additional_parameters"] == {"user_clients": [("CubeDev+Cube", "1.0")]}

    def test_connect_kwargs_for_engine_endpoint(self):
        client = FireboltSdkClient()
        config = ConnectionConfig(
            auth=UsernamePasswordAuth(username="me@example.com", password="pw"),
            engine_endpoint="engine.firebolt.io",
        )

        kwargs = client._connect_kwargs(config)

        assert kwargs["engine_url"] == "engine.firebolt.io"
        assert "account_name" not in kwargs

    @pytest.mark.asyncio
    async def test_connect_translates_unauthorized(self):
        client = FireboltSdkClient()
        config = ConnectionConfig(auth=ClientCredentialsAuth(client_id="id", client_secret="s"))

        with patch(
            "firebolt_driver.clients.firebolt_sdk.firebolt_connect",
            AsyncMock(side_effect=_HttpError(401)),
        ):
            with pytest.raises(EngineClientError) as exc_info:
                await client.connect(config)

        assert exc_info.value.status == 401

    @pytest.mark.asyncio
    async def test_engine_start_runs_sdk_start(self):
        engine = MagicMock()

        await SdkEngine(engine).start_and_wait()

        engine.start.assert_called_once_with()
