"""Ownership of the driver's single logical connection."""

import asyncio
from typing import Optional

from firebolt_driver.logging import get_logger
from firebolt_driver.protocols import EngineClient, EngineConnection
from firebolt_driver.types.models import ConnectionConfig

from .lifecycle import EngineLifecycleGuard

logger = get_logger(__name__)


class ConnectionManager:
    """Lazily creates, shares, invalidates and releases one connection.

    The slot holds the creation *task*, not its result. Every caller that
    arrives while the handshake is in flight awaits that same task, so a
    single connect call is ever issued per creation and all waiters see the
    same connection, or the same failure.

    Example:
        >>> manager = ConnectionManager(client, config, guard)
        >>> conn_a, conn_b = await asyncio.gather(manager.acquire(), manager.acquire())
        >>> assert conn_a is conn_b
    """

    def __init__(
        self,
        client: EngineClient,
        config: ConnectionConfig,
        lifecycle: EngineLifecycleGuard,
    ):
        self._client = client
        self._config = config
        self._lifecycle = lifecycle
        self._connection: Optional["asyncio.Task[EngineConnection]"] = None

    @property
    def has_connection(self) -> bool:
        """Whether a connection (pending or ready) is currently cached."""
        return self._connection is not None

    async def acquire(self) -> EngineConnection:
        """Return the current connection, creating it if absent."""
        if self._connection is None:
            self._connection = asyncio.ensure_future(self._create())
        # Shielded so a cancelled waiter does not cancel the shared creation
        return await asyncio.shield(self._connection)

    async def _create(self) -> EngineConnection:
        try:
            logger.info(
                "Opening Firebolt connection",
                extra={
                    "account": self._config.account,
                    "database": self._config.database,
                    "engine_name": self._config.engine_name,
                },
            )
            connection = await self._client.connect(self._config)
            await self._lifecycle.ensure_running()
            return connection
        except Exception as exc:
            if self._connection is asyncio.current_task():
                self._connection = None
            logger.error(
                "Failed to open Firebolt connection",
                extra={"engine_name": self._config.engine_name, "error": str(exc)},
            )
            raise

    def invalidate(self) -> None:
        """Forget the current connection without closing it remotely."""
        if self._connection is not None:
            logger.info("Invalidating Firebolt connection")
        self._connection = None

    async def release(self) -> None:
        """Destroy the current connection, if any. Safe to call repeatedly."""
        pending = self._connection
        if pending is None:
            return
        self._connection = None
        try:
            connection = await pending
        except Exception as exc:
            # Creation failed: nothing was opened, so nothing to destroy
            logger.warning(
                "Pending Firebolt connection failed during release",
                extra={"error": str(exc)},
            )
            return
        await connection.destroy()
        logger.info("Released Firebolt connection")
