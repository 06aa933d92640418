"""Cache namespaces that load missing values locally or from peers."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

from geecache.byteview import ByteView
from geecache.cache import SyncCache
from geecache.singleflight import CallGroup

logger = logging.getLogger(__name__)

Getter = Callable[[str], Optional[bytes]]


class KeyRequiredError(ValueError):
    """Raised when a lookup is attempted with an empty key."""

    def __init__(self) -> None:
        super().__init__("key is required")


class PeerGetter(Protocol):
    """A remote peer able to return the value of a key in a group."""

    def get(self, group: str, key: str) -> bytes:
        """Return the raw value of ``key`` in ``group``, or raise."""


class PeerPicker(Protocol):
    """Locates the peer that owns a specific key."""

    def pick_peer(self, key: str) -> Optional[PeerGetter]:
        """Return the owning remote peer, or None if the key is local."""


class Group:
    """A named cache whose misses are filled by a peer or by ``getter``."""

    def __init__(self, name: str, cache_bytes: int, getter: Getter) -> None:
        if getter is None:
            raise TypeError("getter is required")
        self.name = name
        self._getter = getter
        self._main_cache = SyncCache(cache_bytes)
        self._peers: Optional[PeerPicker] = None
        self._loader = CallGroup()

    @property
    def peers(self) -> Optional[PeerPicker]:
        """The registered peer picker, if any."""
        return self._peers

    def get(self, key: str) -> ByteView:
        """Return the value for ``key``, loading it on a cache miss."""
        if not key:
            raise KeyRequiredError()
        cached = self._main_cache.get(key)
        if cached is not None:
            logger.info("[GeeCache] hit")
            return cached
        return self._loader.do(key, lambda: self._fetch(key))

    def register_peers(self, peers: PeerPicker) -> None:
        """Register the picker used to choose remote peers; only once."""
        if self._peers is not None:
            raise RuntimeError("register_peers called more than once")
        self._peers = peers

    def _fetch(self, key: str) -> ByteView:
        if self._peers is not None:
            peer = self._peers.pick_peer(key)
            if peer is not None:
                try:
                    return ByteView(peer.get(self.name, key))
                except Exception as exc:
                    logger.warning("[GeeCache] Failed to get from peer %s", exc)
        return self._get_locally(key)

    def _get_locally(self, key: str) -> ByteView:
        data = self._getter(key)
        value = ByteView(data if data is not None else b"")
        self._main_cache.add(key, value)
        return value


_registry_lock = threading.Lock()
_registry: dict[str, Group] = {}


def new_group(name: str, cache_bytes: int, getter: Getter) -> Group:
    """Create a group and register it under ``name``, replacing any previous one."""
    group = Group(name, cache_bytes, getter)
    with _registry_lock:
        _registry[name] = group
    return group


def get_group(name: str) -> Optional[Group]:
    """Return the group registered under ``name``, or None."""
    with _registry_lock:
        return _registry.get(name)