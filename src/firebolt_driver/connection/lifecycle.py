"""Make sure the configured engine is running before queries are sent."""

import time
from typing import Optional

from firebolt_driver.logging import get_logger
from firebolt_driver.protocols import EngineClient

logger = get_logger(__name__)


class EngineLifecycleGuard:
    """Starts the named engine through the engine-management API.

    Without an engine name the driver talks to a fixed engine endpoint
    (legacy mode) and there is nothing to start. Failures propagate; the
    caller decides whether to retry.
    """

    def __init__(self, client: EngineClient, engine_name: Optional[str]):
        self._client = client
        self.engine_name = engine_name

    async def ensure_running(self) -> None:
        if not self.engine_name:
            return

        start_time = time.time()
        logger.info("Ensuring engine is running", extra={"engine_name": self.engine_name})
        engine = await self._client.get_engine_by_name(self.engine_name)
        await engine.start_and_wait()
        logger.info(
            "Engine is running",
            extra={
                "engine_name": self.engine_name,
                "duration.seconds": f"{time.time() - start_time:.6f}",
            },
        )
