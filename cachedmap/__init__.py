from cachedmap.cache import CachedMap, CacheEntry
from cachedmap.config import CacheSettings, get_settings, reset_settings
from cachedmap.errors import CachedMapError, InvalidConfigError
from cachedmap.log import ComponentAdapter, tag_logger
from cachedmap.metrics import AtomicCounter, CacheMetrics
from cachedmap.models import Stats
from cachedmap.rwlock import ReadWriteLock

__all__ = [
    "AtomicCounter",
    "CacheEntry",
    "CacheMetrics",
    "CacheSettings",
    "CachedMap",
    "CachedMapError",
    "ComponentAdapter",
    "InvalidConfigError",
    "ReadWriteLock",
    "Stats",
    "get_settings",
    "reset_settings",
    "tag_logger",
]
