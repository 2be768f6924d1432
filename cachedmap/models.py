from pydantic import BaseModel, ConfigDict, NonNegativeInt


class Stats(BaseModel):
    """Point-in-time projection of a cache's counters and configuration.

    Fields are sampled independently; no cross-field atomicity is promised.
    ``key_ttl`` and ``flush_cycle`` are whole seconds.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    hits: NonNegativeInt = 0
    misses: NonNegativeInt = 0
    writes: NonNegativeInt = 0
    flushes: NonNegativeInt = 0
    max_length: NonNegativeInt = 0
    length: NonNegativeInt = 0
    key_ttl: NonNegativeInt
    flush_cycle: NonNegativeInt
