"""A byte-bounded least-recently-used cache (not thread-safe)."""

from __future__ import annotations

from collections import OrderedDict
from typing import Callable, Optional, Protocol


class Sized(Protocol):
    def __len__(self) -> int: ...


EvictionCallback = Callable[[str, Sized], None]


def _key_size(key: str) -> int:
    return len(key.encode("utf-8"))


class LRUCache:
    """LRU cache whose capacity is measured in bytes of keys plus values.

    A ``max_bytes`` of 0 means the cache is unbounded.  Values must support
    ``len()``, which is taken as their size in bytes.
    """

    def __init__(self, max_bytes: int, on_evicted: Optional[EvictionCallback] = None) -> None:
        self.max_bytes = max_bytes
        self.on_evicted = on_evicted
        self._nbytes = 0
        # Most recently used entries live at the end.
        self._entries: OrderedDict[str, Sized] = OrderedDict()

    @property
    def nbytes(self) -> int:
        """Bytes currently held by keys and values."""
        return self._nbytes

    def add(self, key: str, value: Sized) -> None:
        """Insert or replace ``key``, evicting old entries if over capacity."""
        if key in self._entries:
            old = self._entries[key]
            self._entries.move_to_end(key)
            self._nbytes += len(value) - len(old)
            self._entries[key] = value
        else:
            self._entries[key] = value
            self._nbytes += _key_size(key) + len(value)
        while self.max_bytes != 0 and self.max_bytes < self._nbytes:
            self.remove_oldest()

    def get(self, key: str) -> Optional[Sized]:
        """Return the value for ``key`` and mark it recently used, or None."""
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def remove_oldest(self) -> None:
        """Evict the least recently used entry, if any."""
        if not self._entries:
            return
        key, value = self._entries.popitem(last=False)
        self._nbytes -= _key_size(key) + len(value)
        if self.on_evicted is not None:
            self.on_evicted(key, value)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries