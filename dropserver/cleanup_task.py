"""Background task for sweeping expired pastes and upload sessions."""

import asyncio
import logging
from typing import Optional

from dropserver import config, expiry, utils
from dropserver.service_locator import get_paste_repository, get_upload_repository

logger = logging.getLogger(__name__)


class ExpiredEntrySweeper:
    """
    Background task that periodically purges expired entries.

    Complements the lazy sweep done on every request so memory stays
    bounded when the service is write-heavy and rarely read.
    """

    def __init__(self, interval_seconds: Optional[int] = None):
        """
        Initialize sweeper task.

        Args:
            interval_seconds: Time between sweeps (default DROP_SWEEP_INTERVAL_SECONDS)
        """
        self.interval_seconds = config.SWEEP_INTERVAL if interval_seconds is None else interval_seconds
        self._running = False
        self._task = None

    async def start(self) -> None:
        """Start the background sweep task."""
        if self.interval_seconds <= 0:
            logger.info("Periodic sweep disabled")
            return

        if self._running:
            logger.warning("Sweep task already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run())
        logger.info(f"Started expired entry sweep task (interval: {self.interval_seconds}s)")

    async def stop(self) -> None:
        """Stop the background sweep task."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        logger.info("Stopped expired entry sweep task")

    async def _run(self) -> None:
        """Main loop for sweep task."""
        while self._running:
            try:
                await asyncio.sleep(self.interval_seconds)

                if not self._running:
                    break

                self.sweep_once()

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in sweep task: {e}", exc_info=True)

    def sweep_once(self) -> int:
        """Execute one sweep cycle."""
        return expiry.sweep(get_paste_repository(), get_upload_repository(), utils.now_ms())
