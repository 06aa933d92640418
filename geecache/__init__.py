"""Distributed in-memory cache with LRU eviction, consistent hashing, request coalescing and HTTP peers."""

__version__ = "0.1.0"