"""
Query cache for the dashboards.

Results are stored under tuple keys such as ("members",) or
("memberProfileById", "7"). Mutations drop every key that starts with the
invalidated prefix, so the next read goes back to the backend. Concurrent
writers are last-write-wins.
"""
import logging
import os
import threading
import uuid
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger("gym_app")

QueryKey = Tuple[Hashable, ...]


def _as_key(key) -> QueryKey:
    return key if isinstance(key, tuple) else (key,)


class QueryCache:
    def __init__(self):
        self._entries: Dict[QueryKey, Any] = {}

    def __contains__(self, key) -> bool:
        return _as_key(key) in self._entries

    def get(self, key, default=None):
        return self._entries.get(_as_key(key), default)

    def set(self, key, value):
        self._entries[_as_key(key)] = value

    def fetch(self, key, loader: Callable[[], Any]):
        """Return the cached value for key, loading and storing it on a miss."""
        key = _as_key(key)
        if key in self._entries:
            return self._entries[key]
        value = loader()
        self._entries[key] = value
        return value

    def invalidate(self, prefix) -> int:
        prefix = _as_key(prefix)
        stale = [k for k in self._entries if k[:len(prefix)] == prefix]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def clear(self):
        self._entries.clear()

    def keys(self):
        return list(self._entries)


class QueryCacheRegistry:
    """
    One QueryCache per browser session.

    Holds at most max_sessions caches; the least recently used one is
    evicted when a new session needs room.
    """

    def __init__(self, max_sessions: int = 1000):
        self.max_sessions = max_sessions
        self._caches: "OrderedDict[str, QueryCache]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    def get(self, cache_id: str) -> Optional[QueryCache]:
        with self._lock:
            cache = self._caches.get(cache_id)
            if cache is not None:
                self._caches.move_to_end(cache_id)
            return cache

    def put(self, cache_id: str, cache: QueryCache):
        with self._lock:
            self._caches[cache_id] = cache
            self._caches.move_to_end(cache_id)
            while len(self._caches) > self.max_sessions:
                evicted_id, evicted = self._caches.popitem(last=False)
                evicted.clear()
                logger.debug(f"CACHE: Evicted query cache {evicted_id} (registry full)")

    def for_id(self, cache_id: str) -> QueryCache:
        cache = self.get(cache_id)
        if cache is None:
            cache = QueryCache()
            self.put(cache_id, cache)
        return cache

    def drop(self, cache_id: str):
        with self._lock:
            cache = self._caches.pop(cache_id, None)
        if cache is not None:
            cache.clear()
            logger.debug(f"CACHE: Dropped query cache {cache_id}")

    def ids(self):
        with self._lock:
            return list(self._caches)

    def __len__(self):
        return len(self._caches)


cache_registry = QueryCacheRegistry(int(os.getenv("QUERY_CACHE_MAX_SESSIONS", "1000")))
