"""
Background status sweep.

Runs the match status sweep on a fixed wall-clock interval so matches age
into COMPLETED even when no dashboard is open. The interval is a tuning knob
(STATUS_SWEEP_INTERVAL_SECONDS); correctness does not depend on it because
the sweep is idempotent and also triggered by every dashboard load.
"""

import asyncio
import logging
from typing import Callable, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session

from clubhouse.config import club_now
from clubhouse.services.match_status import run_status_sweep
from clubhouse.services.notifier import MatchNotifier

logger = logging.getLogger(__name__)


class StatusSweepWorker:
    """Background task that periodically completes elapsed matches."""

    def __init__(
        self,
        engine: Engine,
        interval_seconds: float,
        notifier: Optional[MatchNotifier] = None,
        clock: Callable = club_now,
    ):
        self.engine = engine
        self.interval_seconds = interval_seconds
        self.notifier = notifier
        self.clock = clock
        self._worker_task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()

    def start(self) -> None:
        """Start the background sweep worker."""
        if self.interval_seconds <= 0:
            logger.info("Status sweep worker disabled (interval=%s)", self.interval_seconds)
            return
        if self._worker_task is None or self._worker_task.done():
            self._stop_event.clear()
            self._worker_task = asyncio.create_task(self._poll_loop())
            logger.info("Status sweep worker started (every %ss)", self.interval_seconds)

    async def stop(self) -> None:
        """Stop the background sweep worker."""
        self._stop_event.set()
        if self._worker_task and not self._worker_task.done():
            self._worker_task.cancel()
            try:
                await self._worker_task
            except asyncio.CancelledError:
                pass
            logger.info("Status sweep worker stopped")

    def sweep_once(self) -> int:
        """Run one sweep in a fresh session; publishes when anything changed."""
        with Session(self.engine) as session:
            updated = run_status_sweep(session, self.clock())
        if updated and self.notifier is not None:
            self.notifier.publish("auto_update")
        return updated

    async def _poll_loop(self) -> None:
        """Main loop: sweep, then sleep. Repeats until stopped."""
        while not self._stop_event.is_set():
            try:
                updated = await asyncio.to_thread(self.sweep_once)
                if updated:
                    logger.info("Background sweep completed %d matches", updated)
            except Exception as e:
                logger.error(f"Error in status sweep worker: {e}", exc_info=True)

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
                break
            except asyncio.TimeoutError:
                pass
