"""Shared fixtures: an in-memory engine client that scripts engine behaviour."""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import pytest

from firebolt_driver.logging.filters import data_source_var
from firebolt_driver.settings import FireboltSettings, _reload_settings
from firebolt_driver.types.models import ColumnMeta


class FakeEngineError(Exception):
    """Engine client error carrying a status code, like the real client's."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class FakeStatement:
    def __init__(self, rows: List[Dict[str, Any]], meta: List[ColumnMeta], hydrate_row):
        self._rows = rows
        self._meta = meta
        self._hydrate_row = hydrate_row

    async def fetch_result(self) -> Tuple[List[Dict[str, Any]], List[ColumnMeta]]:
        return [self._hydrate_row(row, self._meta) for row in self._rows], self._meta

    async def stream_result(self):
        meta = asyncio.get_running_loop().create_future()
        meta.set_result(self._meta)
        return self._iter_rows(), meta

    async def _iter_rows(self):
        for row in self._rows:
            yield self._hydrate_row(row, self._meta)


class FakeConnection:
    def __init__(self, client: "FakeEngineClient", number: int):
        self.client = client
        self.number = number
        self.destroyed = False
        self.tested = 0

    async def test_connection(self) -> None:
        self.tested += 1
        if self.client.test_delay:
            await asyncio.sleep(self.client.test_delay)

    async def execute(self, query, *, settings, parameters, hydrate_row):
        self.client.executed.append(
            {
                "query": query,
                "settings": dict(settings),
                "parameters": parameters,
                "connection": self.number,
                "data_source": data_source_var.get(),
            }
        )
        if self.client.execute_failures:
            raise self.client.execute_failures.pop(0)
        rows, meta = self.client.results.get(query, ([], []))
        return FakeStatement(rows, meta, hydrate_row)

    async def destroy(self) -> None:
        self.destroyed = True


class FakeEngine:
    def __init__(self, client: "FakeEngineClient", name: str):
        self.client = client
        self.name = name

    async def start_and_wait(self) -> None:
        self.client.engine_starts.append(self.name)
        if self.client.start_failures:
            raise self.client.start_failures.pop(0)


class FakeEngineClient:
    """Scriptable stand-in for the firebolt-sdk adapter."""

    def __init__(self):
        self.connections: List[FakeConnection] = []
        self.connect_failures: List[Exception] = []
        self.execute_failures: List[Exception] = []
        self.start_failures: List[Exception] = []
        self.results: Dict[str, Tuple[List[Dict[str, Any]], List[ColumnMeta]]] = {}
        self.executed: List[Dict[str, Any]] = []
        self.engine_starts: List[str] = []
        self.connect_delay = 0.0
        self.test_delay = 0.0
        self.connect_calls = 0

    async def connect(self, config) -> FakeConnection:
        self.connect_calls += 1
        await asyncio.sleep(self.connect_delay)
        if self.connect_failures:
            raise self.connect_failures.pop(0)
        connection = FakeConnection(self, len(self.connections) + 1)
        self.connections.append(connection)
        return connection

    async def get_engine_by_name(self, name: str) -> FakeEngine:
        return FakeEngine(self, name)


@pytest.fixture(autouse=True)
def clean_settings_cache():
    _reload_settings()
    yield
    _reload_settings()


@pytest.fixture
def fake_client() -> FakeEngineClient:
    return FakeEngineClient()


@pytest.fixture
def settings() -> FireboltSettings:
    return FireboltSettings(
        db_user="service-client-id",
        db_pass="service-secret",
        db_name="analytics",
        account="acme",
        engine_name="analytics_engine",
    )
