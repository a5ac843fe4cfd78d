"""Atomic cells and spin backoff shared by the lock implementations."""

from __future__ import annotations

import threading
import time
from typing import Any, Generic, TypeVar

T = TypeVar("T")

SPIN_LIMIT = 6
YIELD_LIMIT = 10


class Atomic(Generic[T]):
    """A value cell whose read-modify-write operations happen atomically.

    Comparisons in ``compare_exchange`` succeed when the stored value is the
    expected object or compares equal to it.
    """

    __slots__ = ("_value", "_mutex")

    def __init__(self, value: T) -> None:
        self._value = value
        self._mutex = threading.Lock()

    def __repr__(self) -> str:
        return f"Atomic({self.load()!r})"

    def load(self) -> T:
        """Return the current value."""
        with self._mutex:
            return self._value

    def store(self, value: T) -> None:
        """Replace the current value."""
        with self._mutex:
            self._value = value

    def swap(self, value: T) -> T:
        """Store ``value`` and return the value it replaced."""
        with self._mutex:
            previous = self._value
            self._value = value
            return previous

    def compare_exchange(self, current: Any, new: T) -> tuple[bool, T]:
        """Store ``new`` if the value is ``current``.

        Returns ``(succeeded, previous_value)``.
        """
        with self._mutex:
            previous = self._value
            if previous is current or previous == current:
                self._value = new
                return True, previous
            return False, previous

    def fetch_add(self, delta: Any) -> T:
        """Add ``delta`` to the value and return the value before the addition."""
        with self._mutex:
            previous = self._value
            self._value = previous + delta
            return previous


class Backoff:
    """Exponential backoff for spin loops: spin briefly, then yield the CPU."""

    __slots__ = ("_step",)

    def __init__(self) -> None:
        self._step = 0

    def snooze(self) -> None:
        """Back off once, waiting a little longer than the previous time."""
        if self._step <= SPIN_LIMIT:
            for _ in range(1 << self._step):
                pass
        else:
            time.sleep(0)
        if self._step <= YIELD_LIMIT:
            self._step += 1

    def reset(self) -> None:
        """Start backing off from the shortest wait again."""
        self._step = 0

    @property
    def is_completed(self) -> bool:
        """True once backing off has reached its longest wait."""
        return self._step > YIELD_LIMIT