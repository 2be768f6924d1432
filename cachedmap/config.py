
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """Cache configuration loaded from ``CACHEDMAP_*`` environment variables and .env file.

    Durations are in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="CACHEDMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    name: str = Field(default="cachedmap", min_length=1)
    key_timeout: float = Field(default=300.0, gt=0)
    flush_cycle: float = Field(default=900.0, gt=0)


_settings: CacheSettings | None = None


def get_settings() -> CacheSettings:
    """Return the cached CacheSettings singleton. Created on first call."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = CacheSettings()
    return _settings


def reset_settings() -> None:
    """Clear the cached settings. Used in tests."""
    global _settings  # noqa: PLW0603
    _settings = None
