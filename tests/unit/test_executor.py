"""Tests for the one-shot recovery policy of query execution."""

import pytest

from conftest import FakeEngineError
from firebolt_driver.connection import ConnectionManager, EngineLifecycleGuard
from firebolt_driver.constants import ExecutionMode, OutputFormat
from firebolt_driver.execution import RetryableExecutor
from firebolt_driver.types.models import ClientCredentialsAuth, ColumnMeta, ConnectionConfig


@pytest.fixture
def executor(fake_client):
    config = ConnectionConfig(
        auth=ClientCredentialsAuth(client_id="id", client_secret="secret"),
        engine_name="analytics_engine",
    )
    guard = EngineLifecycleGuard(fake_client, config.engine_name)
    return RetryableExecutor(ConnectionManager(fake_client, config, guard), guard)


@pytest.fixture
def orders(fake_client):
    fake_client.results["SELECT * FROM orders"] = (
        [{"id": 1, "status": "open"}, {"id": 2, "status": "closed"}],
        [ColumnMeta(name="id", type="long"), ColumnMeta(name="status", type="text")],
    )


class TestExecute:

    @pytest.mark.asyncio
    async def test_buffered_rows_are_hydrated(self, executor, orders):
        response = await executor.execute("SELECT * FROM orders")

        assert response.data == [{"id": "1", "status": "open"}, {"id": "2", "status": "closed"}]
        assert response.meta[0] == ColumnMeta(name="id", type="long")

    @pytest.mark.asyncio
    async def test_requests_json_output(self, executor, fake_client, orders):
        await executor.execute("SELECT * FROM orders", [7])

        assert fake_client.executed[0]["settings"] == {"output_format": "JSON"}
        assert fake_client.executed[0]["parameters"] == [7]

    @pytest.mark.asyncio
    async def test_stream_mode_returns_iterator(self, executor, orders):
        response = await executor.execute("SELECT * FROM orders", mode=ExecutionMode.STREAM)

        rows = [row async for row in response.data]
        assert rows == [{"id": "1", "status": "open"}, {"id": "2", "status": "closed"}]
        assert [column.name for column in response.meta] == ["id", "status"]


class TestRecovery:

    @pytest.mark.asyncio
    async def test_unauthorized_once_reconnects_and_succeeds(self, executor, fake_client, orders):
        fake_client.execute_failures = [FakeEngineError("token expired", status=401)]

        response = await executor.execute("SELECT * FROM orders")

        assert len(response.data) == 2
        assert fake_client.connect_calls == 2
        assert [call["connection"] for call in fake_client.executed] == [1, 2]

    @pytest.mark.asyncio
    async def test_unauthorized_twice_propagates(self, executor, fake_client):
        second = FakeEngineError("still expired", status=401)
        fake_client.execute_failures = [FakeEngineError("token expired", status=401), second]

        with pytest.raises(FakeEngineError) as exc_info:
            await executor.execute("SELECT 1")

        assert exc_info.value is second
        assert len(fake_client.executed) == 2

    @pytest.mark.asyncio
    async def test_not_found_once_starts_engine_and_succeeds(self, executor, fake_client, orders):
        fake_client.execute_failures = [FakeEngineError("engine stopped", status=404)]

        response = await executor.execute("SELECT * FROM orders")

        assert len(response.data) == 2
        # once when the connection opened, once for recovery
        assert fake_client.engine_starts == ["analytics_engine", "analytics_engine"]
        assert fake_client.connect_calls == 1

    @pytest.mark.asyncio
    async def test_not_found_twice_propagates(self, executor, fake_client):
        fake_client.execute_failures = [
            FakeEngineError("engine stopped", status=404),
            FakeEngineError("engine stopped", status=404),
        ]

        with pytest.raises(FakeEngineError):
            await executor.execute("SELECT 1")

        assert len(fake_client.executed) == 2

    @pytest.mark.asyncio
    async def test_mixed_failures_use_single_retry(self, executor, fake_client):
        fake_client.execute_failures = [
            FakeEngineError("engine stopped", status=404),
            FakeEngineError("token expired", status=401),
        ]

        with pytest.raises(FakeEngineError) as exc_info:
            await executor.execute("SELECT 1")

        assert exc_info.value.status == 401
        assert len(fake_client.executed) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [FakeEngineError("syntax error", status=400), ValueError("bad row")])
    async def test_other_errors_propagate_without_retry(self, executor, fake_client, error):
        fake_client.execute_failures = [error]

        with pytest.raises(type(error)) as exc_info:
            await executor.execute("SELECT 1")

        assert exc_info.value is error
        assert len(fake_client.executed) == 1

    @pytest.mark.asyncio
    async def test_unauthorized_while_connecting_is_retried(self, executor, fake_client):
        fake_client.connect_failures = [FakeEngineError("token expired", status=401)]

        await executor.execute("SELECT 1")

        assert fake_client.connect_calls == 2
        assert len(fake_client.executed) == 1


class TestStreamRecovery:

    @pytest.mark.asyncio
    async def test_unauthorized_stream_reconnects_once(self, executor, fake_client, orders):
        fake_client.execute_failures = [FakeEngineError("token expired", status=401)]

        response = await executor.execute("SELECT * FROM orders", mode=ExecutionMode.STREAM)

        assert [row async for row in response.data] == [
            {"id": "1", "status": "open"},
            {"id": "2", "status": "closed"},
        ]
        assert [call["connection"] for call in fake_client.executed] == [1, 2]

    @pytest.mark.asyncio
    async def test_not_found_stream_starts_engine_once(self, executor, fake_client, orders):
        fake_client.execute_failures = [FakeEngineError("engine stopped", status=404)]

        response = await executor.execute("SELECT * FROM orders", mode=ExecutionMode.STREAM)

        assert len([row async for row in response.data]) == 2
        assert fake_client.engine_starts == ["analytics_engine", "analytics_engine"]

    @pytest.mark.asyncio
    async def test_second_stream_failure_propagates(self, executor, fake_client):
        second = FakeEngineError("engine stopped", status=404)
        fake_client.execute_failures = [FakeEngineError("token expired", status=401), second]

        with pytest.raises(FakeEngineError) as exc_info:
            await executor.execute("SELECT 1", mode=ExecutionMode.STREAM)

        assert exc_info.value is second
        assert len(fake_client.executed) == 2


def test_only_json_output_is_requested():
    assert [output_format.value for output_format in OutputFormat] == ["JSON"]
