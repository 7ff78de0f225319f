import asyncio
import logging
from contextlib import suppress
from typing import Optional

from app.features.auth.services.verification_codes import VerificationCodeStore

logger = logging.getLogger(__name__)

SWEEP_INTERVAL_SECONDS = 5 * 60


class CodeSweeper:
    """
    Background task that periodically drops expired reset codes.

    Purely memory housekeeping: VerificationCodeStore.verify checks expiry on
    its own, so codes behave the same whether or not the sweeper is running.
    """

    def __init__(self, store: VerificationCodeStore, interval: float = SWEEP_INTERVAL_SECONDS):
        self.store = store
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name="reset-code-sweeper"
        )
        logger.info(f"Reset code sweeper started (every {self.interval}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        logger.info("Reset code sweeper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            removed = self.store.sweep()
            if removed:
                logger.debug(f"Swept {removed} expired reset codes")
