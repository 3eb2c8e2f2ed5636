"""
TIMEBOX Board - Poller

Background refresh of a board session on a fixed interval.
"""

import asyncio
import logging
from typing import Optional

from timebox.config import settings
from timebox.board.session import BoardSession

logger = logging.getLogger(__name__)


class BoardPoller:
    """Re-fetches and re-classifies the board every interval until stopped."""

    def __init__(self, session: BoardSession, interval: Optional[float] = None):
        self.session = session
        self.interval = interval if interval is not None else settings.BOARD_POLL_INTERVAL_SECONDS
        self._task: asyncio.Task | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the polling background task."""
        if self._running:
            logger.info("Board poller already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        logger.info("Board poller started (interval=%ss)", self.interval)

    async def stop(self) -> None:
        """Stop the polling background task."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Board poller stopped")

    async def _poll_loop(self) -> None:
        """Main polling loop."""
        while self._running:
            try:
                await self.session.refresh()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("Board refresh failed: %s", e)

            await asyncio.sleep(self.interval)
