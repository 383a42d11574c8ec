"""Background thread that periodically logs store status until shutdown."""
from __future__ import annotations

import logging
import time
from threading import Lock, Thread

from kvserver.services.shutdown import ShutdownSignal
from kvserver.services.store import Store

logger = logging.getLogger("kvserver.reporter")


def next_deadline(deadline: float, now: float, interval: float) -> float:
    """Advance a fixed-rate deadline past ``now``, dropping missed ticks."""
    deadline += interval
    if deadline <= now:
        missed = int((now - deadline) // interval) + 1
        deadline += missed * interval
    return deadline


class Reporter:
    def __init__(self, store: Store, shutdown: ShutdownSignal, interval: float = 5.0):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.store = store
        self.shutdown = shutdown
        self.interval = interval
        self._thread: Thread | None = None
        self._lock = Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                raise RuntimeError("reporter already started")
            self._thread = Thread(target=self._run, name="status-reporter", daemon=True)
            self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self.shutdown.fire()
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("status reporter did not stop within %ss", timeout)

    def report(self) -> None:
        stats = self.store.peek_stats()
        logger.info(
            "server status",
            extra={
                "event": {
                    "requests": stats.requests,
                    "database_size": stats.database_size,
                }
            },
        )

    def _run(self) -> None:
        deadline = time.monotonic() + self.interval
        # wait() returns False on timeout (a tick) and True once shutdown fires
        while not self.shutdown.wait(max(0.0, deadline - time.monotonic())):
            try:
                self.report()
            except Exception:
                logger.exception("status report failed")
            deadline = next_deadline(deadline, time.monotonic(), self.interval)
        logger.info("status reporter stopping")
