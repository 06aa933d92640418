"""Duplicate call suppression: one in-flight execution per key."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional


class _Call:
    __slots__ = ("done", "value", "error")

    def __init__(self) -> None:
        self.done = threading.Event()
        self.value: Any = None
        self.error: Optional[BaseException] = None


class CallGroup:
    """A namespace in which work is executed with duplicate suppression."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls: dict[str, _Call] = {}

    def do(self, key: str, fn: Callable[[], Any]) -> Any:
        """Run ``fn`` for ``key`` unless a call for it is already in flight.

        Concurrent callers with the same key wait for the first call and
        receive its result, or have its exception raised.
        """
        with self._lock:
            call = self._calls.get(key)
            if call is not None:
                leader = False
            else:
                call = _Call()
                self._calls[key] = call
                leader = True

        if not leader:
            call.done.wait()
        else:
            try:
                call.value = fn()
            except BaseException as exc:
                call.error = exc
            finally:
                call.done.set()
                with self._lock:
                    del self._calls[key]

        if call.error is not None:
            raise call.error
        return call.value