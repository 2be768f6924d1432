"""Exception hierarchy for the cachedmap package."""


class CachedMapError(Exception):
    """Base class for all cachedmap errors."""


class InvalidConfigError(CachedMapError, ValueError):
    """Cache constructed with an unusable name or duration."""
