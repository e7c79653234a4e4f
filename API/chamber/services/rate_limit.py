import time
from threading import Lock
from typing import Callable, Dict, Optional, Tuple


class RateLimiter:
    """Fixed-window request counter per client key, held in process memory."""

    def __init__(self, max_requests: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Tuple[float, int]] = {}  # key -> (window start, count)
        self._lock = Lock()

    def hit(self, key: str) -> Optional[int]:
        """Count one request. Returns seconds to wait when over the limit, else None."""
        now = self._clock()
        with self._lock:
            self._evict(now)
            start, count = self._hits.get(key, (now, 0))
            if count >= self.max_requests:
                return max(1, int(start + self.window_seconds - now + 0.999))
            self._hits[key] = (start, count + 1)
            return None

    def _evict(self, now: float) -> None:
        expired = [k for k, (start, _) in self._hits.items() if now - start >= self.window_seconds]
        for k in expired:
            del self._hits[k]

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
