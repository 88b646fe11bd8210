import threading
import time
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional


def now_ms() -> int:
    return int(time.time() * 1000)


class SpellBuffer:
    """Recent spell casts, bounded by count and by age.

    Casts past ``capacity`` push the oldest entry out; ``sweep`` drops
    entries older than ``max_age_ms``. Nothing in the relay reads this back,
    it only feeds the debug endpoint.
    """

    def __init__(self, capacity: int = 50, max_age_ms: int = 5000, clock: Callable[[], int] = now_ms):
        self.capacity = capacity
        self.max_age_ms = max_age_ms
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Deque[Dict[str, Any]] = deque(maxlen=capacity)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def append(self, entry: Dict[str, Any]) -> None:
        with self._lock:
            self._entries.append(entry)

    def sweep(self, now: Optional[int] = None) -> int:
        """Remove expired entries and return how many were dropped."""
        now = self._clock() if now is None else now
        with self._lock:
            kept = [e for e in self._entries if now - e.get('timestamp', 0) <= self.max_age_ms]
            removed = len(self._entries) - len(kept)
            if removed:
                self._entries.clear()
                self._entries.extend(kept)
            return removed

    def snapshot(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(e) for e in self._entries]
