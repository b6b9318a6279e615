# showroom/storage/search_cache.py

"""In-memory inventory search cache keyed by normalised filters."""

import json
import logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace

from showroom.config.settings import Settings
from showroom.models.vehicle import Vehicle

logger = logging.getLogger("showroom.cache")

FilterValue = str | int | float | bool | None
QueryDescriptor = Mapping[str, FilterValue]


def _is_empty(value: object) -> bool:
    """True for values that mean "filter not set"."""
    return value is None or value == ""


def derive_key(descriptor: QueryDescriptor) -> str:
    """Build the canonical cache key for a filter mapping.

    Entries whose value is ``None`` or ``""`` are dropped and the
    remaining keys are serialised in sorted order, so two descriptors
    that differ only in key order or in unset fields share one key.
    """
    kept = {
        str(name): value
        for name, value in descriptor.items()
        if not _is_empty(value)
    }
    return json.dumps(
        kept,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


@dataclass(frozen=True)
class CacheEntry:
    """A cached result page for one normalised query."""

    key: str
    items: tuple[Vehicle, ...]
    total_count: int
    created_at: float


class SearchCache:
    """Bounded, TTL-limited store of fetched result pages.

    One instance is meant to live for a browsing session and be passed
    to whoever needs lookups.  Entries are never updated in place: a
    repeated ``set`` for the same key replaces the entry with a fresh
    ``created_at``.  When full, the oldest entries are evicted first.
    """

    def __init__(
        self,
        max_entries: int = Settings.SEARCH_CACHE_MAX_ENTRIES,
        ttl: float = Settings.SEARCH_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            msg = f"max_entries must be >= 1, got {max_entries}"
            raise ValueError(msg)
        if ttl <= 0:
            msg = f"ttl must be > 0, got {ttl}"
            raise ValueError(msg)
        self._entries: dict[str, CacheEntry] = {}
        self._max_entries = max_entries
        self._ttl = ttl
        self._clock = clock

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def ttl(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, descriptor: object) -> bool:
        """Freshness-aware membership test that never purges."""
        if not isinstance(descriptor, Mapping):
            return False
        entry = self._entries.get(derive_key(descriptor))
        return entry is not None and not self._is_expired(
            entry, self._clock()
        )

    def keys(self) -> list[str]:
        """Keys currently held, oldest first (expired ones included)."""
        return list(self._entries)

    def get(self, descriptor: QueryDescriptor) -> CacheEntry | None:
        """Return a copy of the fresh entry for *descriptor*, or ``None``.

        An expired entry is removed on the way out.
        """
        key = derive_key(descriptor)
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._is_expired(entry, self._clock()):
            del self._entries[key]
            logger.debug("Expired cache entry dropped for %s", key)
            return None

        logger.debug(
            "Cache hit for %s (%d items)", key, len(entry.items)
        )
        return replace(entry)

    def set(
        self,
        descriptor: QueryDescriptor,
        items: Iterable[Vehicle],
        total_count: int,
    ) -> None:
        """Store a fetched page, evicting the oldest entries if full."""
        key = derive_key(descriptor)

        if key in self._entries:
            # Overwrite: re-insert so dict order tracks created_at
            del self._entries[key]
        else:
            while len(self._entries) >= self._max_entries:
                self._evict_oldest()

        entry = CacheEntry(
            key=key,
            items=tuple(items),
            total_count=total_count,
            created_at=self._clock(),
        )
        self._entries[key] = entry
        logger.info(
            "Cached %d items for %s (total=%d)",
            len(entry.items),
            key,
            total_count,
        )

    def clear(self) -> int:
        """Purge all cached entries.

        Returns the number of entries that were removed.
        """
        count = len(self._entries)
        self._entries.clear()
        logger.info("Cache manually purged (%d entries removed)", count)
        return count

    def clear_expired(self) -> int:
        """Remove every entry whose age has reached the TTL.

        Returns the number of entries that were removed.
        """
        now = self._clock()
        before = len(self._entries)
        self._entries = {
            key: entry
            for key, entry in self._entries.items()
            if not self._is_expired(entry, now)
        }
        evicted = before - len(self._entries)
        if evicted:
            logger.debug("Evicted %d expired cache entries", evicted)
        return evicted

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at >= self._ttl

    def _evict_oldest(self) -> None:
        """Drop the single entry with the smallest ``created_at``."""
        oldest = min(
            self._entries.values(), key=lambda e: e.created_at
        )
        del self._entries[oldest.key]
        logger.debug("Evicted oldest cache entry %s", oldest.key)
