"""Immutable view of cached bytes."""

from __future__ import annotations


class ByteView:
    """An immutable holder of bytes; its ``len()`` is the byte count."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes = b"") -> None:
        self._data = bytes(data)

    def __len__(self) -> int:
        return len(self._data)

    def byte_slice(self) -> bytes:
        """Return the data as bytes."""
        return self._data

    def __str__(self) -> str:
        return self._data.decode("utf-8", errors="replace")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ByteView):
            return self._data == other._data
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._data)