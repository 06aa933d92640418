"""Thread-safe LRU cache of ByteViews."""

from __future__ import annotations

import threading
from typing import Optional

from geecache.byteview import ByteView
from geecache.lru import LRUCache


class SyncCache:
    """A lock-guarded LRU cache, created lazily on first add."""

    def __init__(self, cache_bytes: int) -> None:
        self.cache_bytes = cache_bytes
        self._lock = threading.Lock()
        self._lru: Optional[LRUCache] = None

    def add(self, key: str, value: ByteView) -> None:
        with self._lock:
            if self._lru is None:
                self._lru = LRUCache(self.cache_bytes)
            self._lru.add(key, value)

    def get(self, key: str) -> Optional[ByteView]:
        """Return the cached value for ``key``, or None on a miss."""
        with self._lock:
            return None if self._lru is None else self._lru.get(key)