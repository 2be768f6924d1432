"""Component-tagged logger used for flush stats."""

import logging
from collections.abc import MutableMapping
from typing import Any

COMPONENT = "cachedmap"


class ComponentAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges its ``extra`` into each call's ``extra``."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return msg, kwargs


def tag_logger(log: logging.Logger | logging.LoggerAdapter) -> ComponentAdapter:
    """Wrap *log* so every record it emits carries ``component="cachedmap"``.

    An existing adapter is unwrapped first; its own ``extra`` is kept and
    the component tag wins on conflict.
    """
    extra: dict = {}
    if isinstance(log, logging.LoggerAdapter):
        extra.update(log.extra or {})
        log = log.logger
    extra["component"] = COMPONENT
    return ComponentAdapter(log, extra)
