import threading
import time
from dataclasses import dataclass


@dataclass
class _Window:
    count: int
    started_at: float
    length: int

    def expired(self, now: float) -> bool:
        return now - self.started_at >= self.length


class InMemoryRateLimiter:
    """
    Fixed-window limiter for per-client request budgets.

    Callers pass a key such as "<ip>:export". Windows that have run out are
    swept from memory while serving later calls, so the number of tracked
    keys never exceeds the clients seen within one window.
    """

    def __init__(self, sweep_interval_seconds: float = 30.0) -> None:
        self._lock = threading.Lock()
        self._state: dict[str, _Window] = {}
        self._sweep_interval = sweep_interval_seconds
        self._last_sweep = 0.0

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._state)

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < self._sweep_interval:
            return
        self._last_sweep = now
        for key in [k for k, w in self._state.items() if w.expired(now)]:
            del self._state[key]

    def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        """Count one hit for key. Returns (allowed, retry_after_seconds)."""
        now = time.time()
        with self._lock:
            self._sweep(now)
            window = self._state.get(key)
            if window is None or window.expired(now):
                self._state[key] = _Window(count=1, started_at=now, length=window_seconds)
                return True, 0
            if window.count >= limit:
                return False, max(1, int(window.length - (now - window.started_at)))
            window.count += 1
            return True, 0

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._state.clear()
            else:
                self._state.pop(key, None)


rate_limiter = InMemoryRateLimiter()
