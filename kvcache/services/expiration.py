# kvcache/services/expiration.py

import logging
import threading
from typing import Callable, Set

logger = logging.getLogger(__name__)


class ExpirationScheduler:
    """
    Fire-once deferred removals, one daemon timer per schedule() call.

    Timers are never de-duplicated, renewed or cancelled per key: if a key gets
    a 1s TTL and then a 10s TTL, the 1s timer still fires and removes it.
    The only cancellation is shutdown(), which drops every pending timer when
    the owning application stops.
    """

    def __init__(self, remove: Callable[[str], None]):
        # remove: the store's public removal entry point
        self._remove = remove
        self._timers: Set[threading.Timer] = set()
        self._lock = threading.Lock()
        self._closed = False

    def schedule(self, key: str, seconds: float) -> None:
        """Arm a timer that removes `key` after `seconds`."""
        def fire() -> None:
            self._fire(timer, key)

        timer = threading.Timer(seconds, fire)
        timer.daemon = True
        timer.name = f"ttl-{key}"
        with self._lock:
            if self._closed:
                logger.warning("Scheduler is shut down; ignoring TTL for key %r", key)
                return
            self._timers.add(timer)
        timer.start()
        logger.debug("Armed TTL for key %r (%.3f sec)", key, seconds)

    def _fire(self, timer: threading.Timer, key: str) -> None:
        with self._lock:
            self._timers.discard(timer)
        try:
            self._remove(key)
            logger.info("TTL expired for key %r", key)
        except Exception:
            logger.exception("Failed to expire key %r", key)

    def pending(self) -> int:
        """Number of timers armed and not yet fired."""
        with self._lock:
            return len(self._timers)

    def shutdown(self) -> None:
        """Cancel all pending timers and refuse new ones."""
        with self._lock:
            self._closed = True
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        logger.info("Expiration scheduler stopped (%d pending timers cancelled).", len(timers))
