"""Consistent hashing ring with virtual nodes."""

from __future__ import annotations

import bisect
import zlib
from typing import Callable, Optional

HashFunc = Callable[[bytes], int]


class HashRing:
    """Maps keys onto a set of nodes, each placed ``replicas`` times on a ring.

    The default hash is CRC-32 (IEEE).
    """

    def __init__(self, replicas: int, hash_fn: Optional[HashFunc] = None) -> None:
        self.replicas = replicas
        self._hash: HashFunc = hash_fn if hash_fn is not None else zlib.crc32
        self._keys: list[int] = []
        self._hash_map: dict[int, str] = {}

    def add(self, *nodes: str) -> None:
        """Place each node on the ring."""
        for node in nodes:
            for i in range(self.replicas):
                h = int(self._hash(f"{i}{node}".encode("utf-8")))
                self._keys.append(h)
                self._hash_map[h] = node
        self._keys.sort()

    def get(self, key: str) -> Optional[str]:
        """Return the node owning ``key``, or None if the ring is empty."""
        if not self._keys:
            return None
        h = int(self._hash(key.encode("utf-8")))
        idx = bisect.bisect_left(self._keys, h)
        return self._hash_map[self._keys[idx % len(self._keys)]]