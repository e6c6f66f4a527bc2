# rate_limit.py

import logging
import threading
import time

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 10  # seconds


class RateLimiter:
    """
    Global minimum-interval gate for site refreshes.

    The limit applies to every caller at once, not per client. Under a flood of
    requests this protects the rest of the server, at the cost of refusing a
    legitimate push that lands inside the window.

    The last-run timestamp is updated as soon as a caller is let through, so
    the limiter throttles attempts rather than completed refreshes.
    """

    def __init__(self, interval: int = DEFAULT_INTERVAL, now_fn=time.time):
        self.interval = interval
        self.last_run = 0
        self._now_fn = now_fn
        self._lock = threading.Lock()

    def can_run(self) -> bool:
        with self._lock:
            current_time = int(self._now_fn())
            if current_time - self.interval < self.last_run:
                logger.warning(f"rate limit error: last ran at {self.last_run}, current time {current_time}")
                return False
            self.last_run = current_time
            return True
