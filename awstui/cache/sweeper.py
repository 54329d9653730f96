"""
Background expiry sweeper.

Expired entries are already invisible to CacheStore.get(); the sweeper only
reclaims memory held by keys nobody reads again (e.g. keys of a profile the
operator switched away from).
"""

import threading
from enum import Enum
from typing import Optional

from .memory import CacheStore
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 300.0


class SweeperState(Enum):
    IDLE = "idle"
    SWEEPING = "sweeping"


class ExpirySweeper:
    """
    Runs CacheStore.clean_expired() on a fixed interval in a daemon thread.

    The thread lives until stop() is called at process shutdown, or until the
    interpreter exits.
    """

    def __init__(self, store: CacheStore, interval: float = DEFAULT_SWEEP_INTERVAL_SECONDS):
        if interval <= 0:
            raise ValueError(f"Sweep interval must be positive, got {interval}")
        self.store = store
        self.interval = float(interval)
        self.state = SweeperState.IDLE
        self.sweeps = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._start_lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._start_lock:
            if self.running:
                return
            # one event per thread: start() never revives a thread stop() timed out on
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="aws-tui-cache-sweeper",
                daemon=True,
            )
            self._thread.start()
        logger.debug("Cache sweeper started (interval=%ss)", self.interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
        self._thread = None

    def sweep_once(self) -> int:
        self.state = SweeperState.SWEEPING
        try:
            removed = self.store.clean_expired()
        finally:
            self.state = SweeperState.IDLE
        self.sweeps += 1
        if removed:
            logger.debug("Swept %d expired cache entries", removed)
        return removed

    def _run(self, stop_event: threading.Event) -> None:
        # Event.wait returns True once stop() is called
        while not stop_event.wait(self.interval):
            try:
                self.sweep_once()
            except Exception:
                logger.exception("Cache sweep failed")
