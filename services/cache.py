import time
import logging
import threading
from collections import OrderedDict

from flask import current_app

logger = logging.getLogger(__name__)

API_CACHE_TTL_MS = 5 * 60 * 1000  # 5 minutes
API_CACHE_MAX_ENTRIES = 500
EXTENSION_KEY = 'response_cache'


def _monotonic_ms():
    return int(time.monotonic() * 1000)


class ResponseCache:
    """In-process TTL cache for upstream API responses.

    Entries expire ``ttl_ms`` after they are written and are dropped lazily
    when read. When a new key arrives at a full store, expired entries are
    swept first and then, if the store is still full, the single
    oldest-inserted entry is evicted. Reads never reorder entries.
    """

    def __init__(self, ttl_ms=API_CACHE_TTL_MS, max_entries=API_CACHE_MAX_ENTRIES, clock=_monotonic_ms):
        self.ttl_ms = ttl_ms
        self.max_entries = max_entries
        self._clock = clock
        # key -> (expires_at, value), oldest insertion first
        self._entries = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key, default=None):
        """Return the fresh value for ``key`` or ``default``."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            expires_at, value = entry
            if self._clock() < expires_at:
                return value
            del self._entries[key]
            logger.debug(f'Cache entry expired: {key}')
            return default

    def set(self, key, value):
        """Store ``value`` under ``key`` for one TTL and return it."""
        with self._lock:
            now = self._clock()
            if key not in self._entries and len(self._entries) >= self.max_entries:
                self._evict(now)
            self._entries[key] = (now + self.ttl_ms, value)
        return value

    def _evict(self, now):
        stale = [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]
        for k in stale:
            del self._entries[k]
        if len(self._entries) >= self.max_entries:
            oldest, _ = self._entries.popitem(last=False)
            logger.debug(f'Cache full, evicted oldest entry: {oldest}')

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def __contains__(self, key):
        # Raw presence; does not expire anything.
        with self._lock:
            return key in self._entries


def get_response_cache():
    """The cache owned by the running app."""
    return current_app.extensions[EXTENSION_KEY]
