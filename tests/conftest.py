import logging
from datetime import datetime, timezone

import pytest

import cachedmap.cache as cache_mod
from tests.factories import stop_created_caches


@pytest.fixture(autouse=True)
def _stop_caches():
    """Stop the flusher thread of every cache built through the factories."""
    yield
    stop_created_caches()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "CACHEDMAP_NAME",
        "CACHEDMAP_KEY_TIMEOUT",
        "CACHEDMAP_FLUSH_CYCLE",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> dict:
    """Freeze the cache's wall clock; move it by assigning ``clock["now"]``."""
    t = {"now": datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)}
    monkeypatch.setattr(cache_mod, "_utcnow", lambda: t["now"])
    return t


class RecordingHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def stats_logger():
    """A private logger plus the handler that captures what it emits."""
    log = logging.getLogger("tests.cachedmap.stats")
    log.setLevel(logging.INFO)
    log.propagate = False
    handler = RecordingHandler()
    log.addHandler(handler)
    yield log, handler
    log.removeHandler(handler)
