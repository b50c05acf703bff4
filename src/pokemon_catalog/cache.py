"""In-process cache tiers.

A ``CacheTier`` is a bounded, thread-safe key/value cache with a single
time-to-live measured from the moment an entry is written. Capacity eviction
is least-recently-used; expiry is lazy (checked on access). ``CacheTiers``
holds the named tiers the catalog service uses, each configured on its own.
"""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pokemon_catalog.config import Settings, settings
from pokemon_catalog.logging import get_logger

logger = get_logger(__name__)

V = TypeVar("V")

_MISSING = object()

POKEMON = "pokemon"
POKEMON_EXISTS = "pokemon_exists"
POKEMON_LIST = "pokemon_list"
POKEMON_SEARCH = "pokemon_search"
POKEMON_STATS = "pokemon_stats"


@dataclass
class TierStats:
    """Counters for one tier."""

    name: str
    max_size: int
    ttl_seconds: float
    size: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "max_size": self.max_size,
            "ttl_seconds": self.ttl_seconds,
            "size": self.size,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "expirations": self.expirations,
            "hit_rate": round(self.hit_rate, 4),
        }


class CacheTier(Generic[V]):
    """LRU cache whose entries expire a fixed time after they were written.

    Example:
        ```python
        tier = CacheTier("pokemon", max_size=1000, ttl=1800)
        tier.put("id_1", entity)
        tier.get("id_1")             # entity, until 30 minutes pass
        tier.invalidate_all()
        ```
    """

    def __init__(
        self,
        name: str,
        max_size: int,
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be greater than 0")
        if ttl <= 0:
            raise ValueError("ttl must be greater than 0")

        self._name = name
        self._max_size = max_size
        self._ttl = ttl
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[V, float]] = OrderedDict()
        self._lock = threading.RLock()
        self._stats = TierStats(name=name, max_size=max_size, ttl_seconds=ttl)

    @property
    def name(self) -> str:
        return self._name

    def get(self, key: Hashable, default: Any = None) -> V | Any:
        """Return the cached value, or ``default`` if absent or expired."""
        with self._lock:
            item = self._entries.get(key, _MISSING)
            if item is _MISSING:
                self._stats.misses += 1
                return default

            value, written_at = item
            if self._clock() - written_at >= self._ttl:
                del self._entries[key]
                self._stats.expirations += 1
                self._stats.misses += 1
                return default

            self._entries.move_to_end(key)
            self._stats.hits += 1
            return value

    def put(self, key: Hashable, value: V) -> None:
        """Insert or replace an entry, evicting the least recently used."""
        with self._lock:
            self._entries[key] = (value, self._clock())
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_size:
                self._entries.popitem(last=False)
                self._stats.evictions += 1

    def get_or_load(self, key: Hashable, loader: Callable[[], V]) -> V:
        """Cache-first lookup. Errors raised by ``loader`` propagate and cache nothing."""
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            logger.debug("cache_hit", tier=self._name, key=key)
            return value

        logger.debug("cache_miss", tier=self._name, key=key)
        value = loader()
        self.put(key, value)
        return value

    def invalidate(self, key: Hashable) -> bool:
        with self._lock:
            return self._entries.pop(key, _MISSING) is not _MISSING

    def invalidate_all(self) -> int:
        """Drop every entry regardless of age. Returns how many were dropped."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            item = self._entries.get(key, _MISSING)
            return item is not _MISSING and self._clock() - item[1] < self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> TierStats:
        with self._lock:
            return TierStats(
                name=self._name,
                max_size=self._max_size,
                ttl_seconds=self._ttl,
                size=len(self._entries),
                hits=self._stats.hits,
                misses=self._stats.misses,
                evictions=self._stats.evictions,
                expirations=self._stats.expirations,
            )


class CacheTiers:
    """The named tiers used by the catalog, each independently configured."""

    def __init__(self, tiers: dict[str, CacheTier]) -> None:
        self._tiers = dict(tiers)

    @classmethod
    def create(
        cls,
        config: Settings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "CacheTiers":
        """Build the five standard tiers from settings."""
        config = config or settings
        specs = {
            POKEMON: (config.cache_pokemon_max_size, config.cache_pokemon_ttl),
            POKEMON_EXISTS: (config.cache_exists_max_size, config.cache_exists_ttl),
            POKEMON_LIST: (config.cache_list_max_size, config.cache_list_ttl),
            POKEMON_SEARCH: (config.cache_search_max_size, config.cache_search_ttl),
            POKEMON_STATS: (config.cache_stats_max_size, config.cache_stats_ttl),
        }
        tiers = {
            name: CacheTier(name, max_size=max_size, ttl=ttl, clock=clock)
            for name, (max_size, ttl) in specs.items()
        }
        logger.info("cache_tiers_configured", tiers=sorted(tiers))
        return cls(tiers)

    def __getitem__(self, name: str) -> CacheTier:
        return self._tiers[name]

    def __iter__(self):
        return iter(self._tiers.values())

    @property
    def pokemon(self) -> CacheTier:
        return self._tiers[POKEMON]

    @property
    def exists(self) -> CacheTier:
        return self._tiers[POKEMON_EXISTS]

    @property
    def lists(self) -> CacheTier:
        return self._tiers[POKEMON_LIST]

    @property
    def search(self) -> CacheTier:
        return self._tiers[POKEMON_SEARCH]

    @property
    def stats_tier(self) -> CacheTier:
        return self._tiers[POKEMON_STATS]

    def invalidate_all(self, *names: str) -> None:
        """Clear the named tiers, or every tier when no names are given."""
        for name in names or tuple(self._tiers):
            dropped = self._tiers[name].invalidate_all()
            logger.debug("cache_tier_cleared", tier=name, dropped=dropped)

    def stats(self) -> dict[str, dict[str, Any]]:
        return {name: tier.stats().to_dict() for name, tier in self._tiers.items()}
