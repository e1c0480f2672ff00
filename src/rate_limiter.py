import threading
import time
from time import perf_counter
from typing import Optional


class RateLimiter:
    """Token-bucket rate limiter gating outbound API requests.

    Args:
        rate_per_sec: Tokens refilled per second (clamped to at least 1).
        burst: Bucket capacity (clamped to at least 1); defaults to the rate.
    """

    def __init__(self, rate_per_sec: float, burst: Optional[int] = None) -> None:
        self.rate: float = max(1.0, float(rate_per_sec))
        self.capacity: float = max(1.0, float(burst)) if burst is not None else self.rate
        self._tokens: float = self.capacity
        self._last: float = perf_counter()
        self._lock = threading.Lock()

    def _refill(self) -> None:
        now = perf_counter()
        elapsed = now - self._last
        self._last = now
        self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)

    def wait(self) -> None:
        """Blocks the calling thread until a token is available, then takes it."""
        while True:
            with self._lock:
                self._refill()
                if self._tokens >= 1.0:
                    self._tokens -= 1.0
                    return
                wait_time = (1.0 - self._tokens) / self.rate
            time.sleep(wait_time)
