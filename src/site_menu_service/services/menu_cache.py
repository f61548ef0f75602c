"""In-process TTL cache for assembled menu forests."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from site_menu_service.models.menu_models import DisplayMenuItem
from site_menu_service.observability.metrics import (
    record_cache_hit,
    record_cache_invalidation,
    record_cache_miss,
)

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


@dataclass
class CacheEntry:
    """Cached forest and the clock reading it was stored at.

    Attributes:
        forest: Private copy of the assembled menu
        stored_at: Clock value when the entry was written
    """

    forest: list[DisplayMenuItem]
    stored_at: float


def _copy_forest(forest: list[DisplayMenuItem]) -> list[DisplayMenuItem]:
    return [node.model_copy(deep=True) for node in forest]


class MenuCache:
    """Location-keyed cache of menu forests with lazy TTL expiry.

    One instance is created at start-up and shared by every request handler
    of the process. Entries are copied on the way in and on the way out so
    callers can never mutate cached state. There is no locking: concurrent
    misses may both store a result and the last put wins.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Age at which an entry stops being served
            clock: Source of the current time in seconds
        """
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, location: str) -> list[DisplayMenuItem] | None:
        """Return a copy of the cached forest for a location.

        Args:
            location: Location key

        Returns:
            Deep copy of the forest, or None on a miss or expired entry
        """
        entry = self._entries.get(location)
        if entry is None or self.clock() - entry.stored_at >= self.ttl_seconds:
            logger.debug(f"Menu cache miss for location: {location}")
            record_cache_miss(location)
            return None

        logger.debug(f"Menu cache hit for location: {location}")
        record_cache_hit(location)
        return _copy_forest(entry.forest)

    def put(self, location: str, forest: list[DisplayMenuItem]) -> None:
        """Store a copy of a forest for a location, replacing any entry.

        Args:
            location: Location key
            forest: Assembled menu to cache
        """
        self._entries[location] = CacheEntry(forest=_copy_forest(forest), stored_at=self.clock())

    def invalidate(self, location: str) -> None:
        """Drop the entry for one location.

        Args:
            location: Location key
        """
        if self._entries.pop(location, None) is not None:
            logger.info(f"Cleared menu cache for location: {location}")
            record_cache_invalidation(location)
        else:
            logger.info(f"No menu cache to clear for location: {location}")

    def invalidate_all(self) -> None:
        """Drop every cached entry."""
        count = len(self._entries)
        if count:
            self._entries.clear()
            logger.info(f"Cleared all menu caches, count: {count}")
            record_cache_invalidation("*")
        else:
            logger.info("No menu caches to clear")

    def locations(self) -> list[str]:
        """List the locations that currently hold an entry, expired or not."""
        return sorted(self._entries)
