"""Thread-safe usage counters for CachedMap."""

import threading


class AtomicCounter:
    """Monotonic integer tally safe to bump from many threads."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def increment(self, n: int = 1) -> int:
        if n < 0:
            raise ValueError(f"Counter increment must be non-negative, got {n}")
        with self._lock:
            self._value += n
            return self._value

    @property
    def value(self) -> int:
        return self._value


class CacheMetrics:
    """Tracks hits, misses, writes, flushes and the largest observed length."""

    def __init__(self) -> None:
        self.hits = AtomicCounter()
        self.misses = AtomicCounter()
        self.writes = AtomicCounter()
        self.flushes = AtomicCounter()
        self._max_length = 0
        self._max_lock = threading.Lock()

    @property
    def max_length(self) -> int:
        return self._max_length

    def observe_length(self, length: int) -> int:
        """Raise max_length to ``length`` if larger. Returns the stored maximum."""
        with self._max_lock:
            if length > self._max_length:
                self._max_length = length
            return self._max_length

    @property
    def hit_rate(self) -> float:
        hits = self.hits.value
        total = hits + self.misses.value
        if total == 0:
            return 0.0
        return hits / total
