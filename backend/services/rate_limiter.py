"""
Per-client request rate limiting
Sliding window of request timestamps per client address
"""

from collections import defaultdict, deque
from typing import Callable, Deque, Dict
import logging
import threading
import time

logger = logging.getLogger(__name__)

PRUNE_THRESHOLD = 1024


class RateLimiter:
    """
    Allows at most `max_requests` per client within any `window_seconds` span

    Args:
        max_requests: Requests allowed per window; 0 disables limiting
        window_seconds: Window length
        clock: Monotonic time source
    """

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.max_requests > 0

    def allow(self, client: str) -> bool:
        """Record a request from `client`; False when it is over the limit"""
        if not self.enabled:
            return True

        now = self._clock()
        with self._lock:
            hits = self._hits[client]
            while hits and now - hits[0] >= self.window_seconds:
                hits.popleft()

            if len(hits) >= self.max_requests:
                logger.warning(f"Rate limit exceeded for {client}")
                return False

            hits.append(now)
            if len(self._hits) > PRUNE_THRESHOLD:
                self._prune(now)
            return True

    def retry_after(self, client: str) -> int:
        """Seconds until `client` may send another request"""
        with self._lock:
            hits = self._hits.get(client)
            if not hits:
                return 0
            return max(1, int(self.window_seconds - (self._clock() - hits[0]) + 0.999))

    def _prune(self, now: float) -> None:
        # Drop clients whose whole window has expired
        stale = [
            client for client, hits in self._hits.items()
            if not hits or now - hits[-1] >= self.window_seconds
        ]
        for client in stale:
            del self._hits[client]
