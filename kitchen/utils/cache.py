"""
Keyed query cache for API reads.

Every read the screen performs (recipe list, inventory, one recipe's items) is
stored under a key of the form (resource, id). Results are always filed under the
key they were requested with, so a slow response for a recipe that is no longer
selected can never show up under the current selection.

Entries expire after a TTL like the search cache did, and can be invalidated
explicitly after a mutation. An expired or invalidated entry keeps its last data
until the refetch completes.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, Optional[Hashable]]

STATUS_LOADING = "loading"
STATUS_SUCCESS = "success"
STATUS_ERROR = "error"

# Resources cached by the recipe screen
RESOURCE_RECIPES = "recipes"
RESOURCE_INVENTORY = "inventory"
RESOURCE_RECIPE_ITEMS = "recipe_items"

DEFAULT_TTL_SECONDS = 60


def recipes_key() -> CacheKey:
    return (RESOURCE_RECIPES, None)


def inventory_key() -> CacheKey:
    return (RESOURCE_INVENTORY, None)


def recipe_items_key(recipe_id: int) -> CacheKey:
    return (RESOURCE_RECIPE_ITEMS, recipe_id)


@dataclass
class CacheEntry:
    """State of one cached read."""
    data: Any = None
    fetched_at: Optional[float] = None
    status: str = STATUS_LOADING
    error: Optional[str] = None
    stale: bool = False
    request_id: int = 0

    @property
    def is_loading(self) -> bool:
        return self.status == STATUS_LOADING

    @property
    def is_error(self) -> bool:
        return self.status == STATUS_ERROR


class QueryCache:
    """
    In-memory cache of API reads keyed by (resource, id).

    Usage:
        cache = QueryCache()
        entry = cache.fetch(recipes_key(), api_client.list_recipes)
        ...
        cache.invalidate(recipes_key())  # next fetch() calls the loader again
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._request_counter = 0

    def get(self, key: CacheKey) -> Optional[CacheEntry]:
        """Return the entry for key, or None if it was never requested."""
        return self._entries.get(key)

    def data(self, key: CacheKey, default: Any = None) -> Any:
        """Return the last successfully fetched data for key, or default."""
        entry = self._entries.get(key)
        if entry is None or entry.fetched_at is None:
            return default
        return entry.data

    def needs_fetch(self, key: CacheKey) -> bool:
        """
        True when key has never been fetched, was invalidated, or has expired.

        Entries in error state are not refetched automatically; use invalidate()
        (the Retry action) for that.
        """
        entry = self._entries.get(key)
        if entry is None:
            return True
        if entry.is_loading or entry.is_error:
            return False
        if entry.stale:
            return True
        return entry.fetched_at is None or self._clock() - entry.fetched_at > self.ttl_seconds

    def begin(self, key: CacheKey) -> int:
        """
        Mark key as loading and return a request id for resolve()/fail().

        Previous data is kept so the screen can keep showing it while refetching.
        """
        self._request_counter += 1
        entry = self._entries.setdefault(key, CacheEntry())
        entry.status = STATUS_LOADING
        entry.error = None
        entry.request_id = self._request_counter
        return self._request_counter

    def resolve(self, key: CacheKey, data: Any, request_id: int) -> bool:
        """
        Store the result of the request begun with request_id.

        Returns False (and drops the data) if a newer request for the same key has
        been started since.
        """
        entry = self._entries.get(key)
        if entry is None or entry.request_id != request_id:
            logger.debug("Discarding superseded response for %s (request %d)", key, request_id)
            return False
        entry.data = data
        entry.fetched_at = self._clock()
        entry.status = STATUS_SUCCESS
        entry.error = None
        entry.stale = False
        return True

    def fail(self, key: CacheKey, error: str, request_id: int) -> bool:
        """Record a failed request; returns False if it was superseded."""
        entry = self._entries.get(key)
        if entry is None or entry.request_id != request_id:
            logger.debug("Discarding superseded failure for %s (request %d)", key, request_id)
            return False
        entry.status = STATUS_ERROR
        entry.error = error
        return True

    def fetch(self, key: CacheKey, loader: Callable[[], Any], retries: int = 1) -> CacheEntry:
        """
        Return the entry for key, calling loader first if needs_fetch(key).

        loader returns the data, or None on failure (the api_client convention); an
        exception raised by loader also counts as a failure. A failed load is retried
        `retries` more times before the entry is marked as an error.
        """
        if self.needs_fetch(key):
            request_id = self.begin(key)
            data = None
            error = "Request failed"
            for _attempt in range(retries + 1):
                try:
                    data = loader()
                except Exception as e:
                    logger.warning("Loading %s failed: %s", key, e)
                    data = None
                    error = str(e) or error
                if data is not None:
                    break
            if data is None:
                self.fail(key, error, request_id)
            else:
                self.resolve(key, data, request_id)
        return self._entries[key]

    def invalidate(self, key: CacheKey) -> None:
        """Mark one entry stale (and clear any error) so the next fetch() reloads it."""
        entry = self._entries.get(key)
        if entry is None:
            return
        logger.debug("Invalidating %s", key)
        entry.stale = True
        if entry.is_loading or entry.is_error:
            # Drop the in-flight request (its result may predate the mutation) or the
            # recorded failure, so fetch() runs again
            if entry.fetched_at is None:
                del self._entries[key]
                return
            entry.request_id = 0
            entry.status = STATUS_SUCCESS
            entry.error = None

    def invalidate_resource(self, resource: str) -> None:
        """Invalidate every entry of one resource, whatever its id."""
        for key in [k for k in self._entries if k[0] == resource]:
            self.invalidate(key)

    def clear(self) -> None:
        """Drop all entries (useful for testing)."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
