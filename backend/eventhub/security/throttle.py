"""Per-client request throttle over a fixed one-minute window."""
import logging
import threading
import time
from typing import Callable

from eventhub.exceptions import RateLimited

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60.0
SWEEP_EVERY = 1000  # hits between sweeps of expired windows


class RequestThrottle:
    """Counts requests per client key and rejects once the ceiling is exceeded.

    A client's window restarts on the first request made more than one minute
    after the window opened. Rejected requests still count.
    """

    def __init__(
        self,
        requests_per_minute: int,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
        sweep_every: int = SWEEP_EVERY,
    ):
        self.requests_per_minute = requests_per_minute
        self.enabled = enabled
        self.sweep_every = sweep_every
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, list] = {}  # client key -> [window_start, count]
        self._hits = 0

    def hit(self, client_key: str) -> int:
        """Record one request for ``client_key`` and return its count in the current window."""
        if not self.enabled:
            return 0

        now = self._clock()
        with self._lock:
            self._hits += 1
            if self._hits % self.sweep_every == 0:
                self._sweep(now)
            window = self._windows.get(client_key)
            if window is None or now - window[0] > WINDOW_SECONDS:
                window = [now, 0]
                self._windows[client_key] = window
            window[1] += 1
            count = window[1]

        if count > self.requests_per_minute:
            logger.warning("Rate limit exceeded for client %s (%d requests)", client_key, count)
            raise RateLimited("Rate limit exceeded. Please try again later.")
        return count

    def _sweep(self, now: float) -> None:
        """Drop windows that have run out. Caller holds the lock."""
        expired = [key for key, (started, _) in self._windows.items() if now - started > WINDOW_SECONDS]
        for key in expired:
            del self._windows[key]
        if expired:
            logger.debug("Dropped %d expired throttle windows", len(expired))

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)
