"""Expiring key/value cache with periodic bulk eviction.

Every entry carries an absolute ``remove_time``; reads at or past that
instant are misses. A daemon thread swaps the whole entry table for an
empty one every ``flush_cycle``, so an entry lives in memory at most one
flush cycle past its expiry and no per-key timers are needed.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from cachedmap.config import CacheSettings
from cachedmap.errors import InvalidConfigError
from cachedmap.log import ComponentAdapter, tag_logger
from cachedmap.metrics import CacheMetrics
from cachedmap.models import Stats
from cachedmap.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)

Duration = timedelta | float | int


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_timedelta(value: Duration, field: str) -> timedelta:
    if isinstance(value, timedelta):
        duration = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        duration = timedelta(seconds=value)
    else:
        raise InvalidConfigError(f"{field} must be a timedelta or a number of seconds, got {value!r}")
    if duration <= timedelta(0):
        raise InvalidConfigError(f"{field} must be positive, got {duration}")
    return duration


@dataclass(frozen=True, slots=True)
class CacheEntry:
    data: object
    remove_time: datetime


class CachedMap:
    """Thread-safe expiring map from string keys to opaque values.

    Args:
        name: Identifier reported in stats.
        key_timeout: TTL applied by :meth:`set` (timedelta or seconds).
        flush_cycle: Interval between full-table flushes (timedelta or seconds).
        log: Optional logger that receives a stats record after each flush.

    Raises:
        InvalidConfigError: If ``name`` is empty or a duration is not positive.
    """

    def __init__(
        self,
        name: str,
        key_timeout: Duration,
        flush_cycle: Duration,
        log: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        if not name:
            raise InvalidConfigError("Cache name must not be empty")
        self.name = name
        self.key_timeout = _as_timedelta(key_timeout, "key_timeout")
        self.flush_cycle = _as_timedelta(flush_cycle, "flush_cycle")
        self.metrics = CacheMetrics()

        self._entries: dict[str, CacheEntry] = {}
        self._lock = ReadWriteLock()
        self._log: ComponentAdapter | None = None
        self.set_log(log)

        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run_flusher, name=f"cachedmap-flusher-{name}", daemon=True
        )
        self._thread.start()
        logger.debug(
            "Cache '%s' started (ttl=%s, flush cycle=%s)", name, self.key_timeout, self.flush_cycle
        )

    @classmethod
    def from_settings(
        cls,
        settings: CacheSettings,
        log: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> "CachedMap":
        """Build a cache from a :class:`CacheSettings` instance."""
        return cls(settings.name, settings.key_timeout, settings.flush_cycle, log)

    # ── Entry table ──────────────────────────────────────────────────────

    def set(self, key: str, data: object) -> datetime:
        """Store *data* for ``key_timeout`` from now.

        Returns the computed remove time so it can be reused in a
        coordinated :meth:`set_until` on another cache.
        """
        remove_time = _utcnow() + self.key_timeout
        self.set_until(key, data, remove_time)
        return remove_time

    def set_until(self, key: str, data: object, remove_time: datetime) -> None:
        """Store *data* until ``remove_time``.

        A remove time in the past is accepted and counted as a write; the
        entry is simply never returned by :meth:`get`. Naive datetimes are
        taken as local time.
        """
        if remove_time.tzinfo is None:
            remove_time = remove_time.astimezone(timezone.utc)
        entry = CacheEntry(data=data, remove_time=remove_time)
        with self._lock.write_locked():
            self._entries[key] = entry
            self.metrics.writes.increment()

    def get(self, key: str) -> tuple[object | None, bool]:
        """Return ``(value, True)`` for a live entry, else ``(None, False)``."""
        with self._lock.read_locked():
            entry = self._entries.get(key)
        if entry is None or _utcnow() >= entry.remove_time:
            self.metrics.misses.increment()
            return None, False
        self.metrics.hits.increment()
        return entry.data, True

    def __len__(self) -> int:
        # Unguarded best-effort read; get_stats() for a snapshot.
        return len(self._entries)

    # ── Stats & logging ──────────────────────────────────────────────────

    def get_stats(self) -> Stats:
        length = len(self._entries)
        return Stats(
            name=self.name,
            hits=self.metrics.hits.value,
            misses=self.metrics.misses.value,
            writes=self.metrics.writes.value,
            flushes=self.metrics.flushes.value,
            # max_length is otherwise only raised at flush time
            max_length=self.metrics.observe_length(length),
            length=length,
            key_ttl=int(self.key_timeout.total_seconds()),
            flush_cycle=int(self.flush_cycle.total_seconds()),
        )

    def set_log(self, log: logging.Logger | logging.LoggerAdapter | None) -> None:
        """Replace the logger that receives flush stats. ``None`` silences it."""
        self._log = tag_logger(log) if log is not None else None

    @property
    def log(self) -> ComponentAdapter | None:
        return self._log

    def __str__(self) -> str:
        return _describe(self.get_stats(), self.key_timeout, self.flush_cycle)

    # ── Flusher ──────────────────────────────────────────────────────────

    def flush(self) -> int:
        """Swap the entry table for an empty one. Returns the number of entries dropped."""
        with self._lock.write_locked():
            old_entries = self._entries
            self._entries = {}
        dropped = len(old_entries)
        self.metrics.observe_length(dropped)
        self.metrics.flushes.increment()

        log = self._log
        if log is not None:
            stats = self.get_stats()
            try:
                log.info(
                    "%s",
                    _describe(stats, self.key_timeout, self.flush_cycle),
                    extra={"stats": stats.model_dump()},
                )
            except Exception:
                logger.exception("Failed to emit stats for cache '%s'", self.name)
        return dropped

    def _run_flusher(self) -> None:
        interval = self.flush_cycle.total_seconds()
        while not self._stop_event.wait(timeout=interval):
            self.flush()
        logger.debug("Flusher for cache '%s' exited", self.name)

    @property
    def running(self) -> bool:
        """True while the flusher thread is alive."""
        return self._thread.is_alive()

    def stop(self, timeout: float | None = None) -> None:
        """Stop the periodic flush. Other operations keep working."""
        self._stop_event.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def __enter__(self) -> "CachedMap":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


def _describe(stats: Stats, key_timeout: timedelta, flush_cycle: timedelta) -> str:
    return (
        f"<{stats.name} len={stats.length} maxlen={stats.max_length} "
        f"hits={stats.hits} misses={stats.misses} writes={stats.writes} "
        f"flushes={stats.flushes} ttl={key_timeout.total_seconds():g}s "
        f"fc={flush_cycle.total_seconds():g}s>"
    )
