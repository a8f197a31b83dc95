# File: src/mstair/runpoint/core/once.py
"""
A value computed at most once, safe to read from many threads.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar


__all__ = ["OnceValue"]

T = TypeVar("T")


class OnceValue(Generic[T]):
    """
    Memo cell that runs its factory exactly once.

    States: empty -> resolving (lock held) -> resolved. Readers arriving while
    another thread resolves block on the lock and then observe the stored value.
    If the factory raises, the cell stays empty and the exception propagates.
    """

    __slots__ = ("_done", "_factory", "_lock", "_value")

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory: Callable[[], T] | None = factory
        self._lock = threading.Lock()
        self._done = False
        self._value: T | None = None

    def get(self) -> T:
        """Return the value, computing it on the first call."""
        if not self._done:
            with self._lock:
                if not self._done:
                    factory = self._factory
                    if factory is None:
                        raise RuntimeError(f"{self.__class__.__name__} has no factory and no value")
                    self._value = factory()
                    self._factory = None  # release closure references
                    self._done = True
        return self._value  # type: ignore[return-value]

    @property
    def is_resolved(self) -> bool:
        return self._done

    def __repr__(self) -> str:
        state = f"resolved={self._value!r}" if self._done else "empty"
        return f"<{self.__class__.__name__} {state}>"


# End of file: src/mstair/runpoint/core/once.py
