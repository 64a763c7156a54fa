"""Background eviction of aged job records."""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Optional

from app.core.logging import get_logger
from app.models.job import utcnow
from app.services.job_store import InMemoryJobStore

logger = get_logger(__name__)


class RetentionSweeper:
    """Periodically removes jobs older than the retention window.

    Eviction is by age alone: a job still processing past the window is
    removed as well.
    """

    def __init__(
        self,
        store: InMemoryJobStore,
        retention: timedelta = timedelta(hours=24),
        interval_seconds: float = 3600.0,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._retention = retention
        self._interval = interval_seconds
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def sweep_once(self) -> int:
        """Run a single eviction pass and return the number of removed jobs."""

        cutoff = self._clock() - self._retention
        removed = self._store.remove_older_than(cutoff)
        logger.info("retention_sweep_completed", removed=removed, cutoff=cutoff.isoformat())
        return removed

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="retention-sweeper", daemon=True)
        self._thread.start()
        logger.info("retention_sweeper_started", interval_seconds=self._interval)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("retention_sweeper_stopped")

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                self.sweep_once()
            except Exception as exc:
                logger.exception("retention_sweep_failed", error=str(exc))
