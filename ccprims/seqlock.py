"""Sequence locks: writers take the lock, readers validate afterwards."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from ccprims.atomic import Atomic, Backoff

T = TypeVar("T")
R = TypeVar("R")

_USIZE_MASK = (1 << 64) - 1


class UpgradeError(Exception):
    """A reader could not be upgraded because a writer intervened."""


class RawSeqLock:
    """A sequence counter: odd while a writer holds the lock."""

    def __init__(self) -> None:
        self._seq = Atomic(0)

    def __repr__(self) -> str:
        return f"RawSeqLock(seq={self._seq.load()})"

    def write_lock(self) -> int:
        """Acquire a writer's lock and return the even sequence it started from."""
        backoff = Backoff()
        while True:
            seq = self._seq.load()
            if seq & 1 == 0 and self._seq.compare_exchange(seq, (seq + 1) & _USIZE_MASK)[0]:
                return seq
            backoff.snooze()

    def write_unlock(self, seq: int) -> None:
        """Release a writer's lock taken at sequence ``seq``."""
        self._seq.store((seq + 2) & _USIZE_MASK)

    def read_begin(self) -> int:
        """Wait until no writer holds the lock and return the current sequence."""
        backoff = Backoff()
        while True:
            seq = self._seq.load()
            if seq & 1 == 0:
                return seq
            backoff.snooze()

    def read_validate(self, seq: int) -> bool:
        """Return whether no writer has run since ``seq`` was read."""
        return seq == self._seq.load()

    def upgrade(self, seq: int) -> None:
        """Turn a read at sequence ``seq`` into a writer's lock.

        Raises UpgradeError if a writer has run since ``seq`` was read.
        """
        if seq & 1:
            raise ValueError("sequence number must be even")
        if not self._seq.compare_exchange(seq, (seq + 1) & _USIZE_MASK)[0]:
            raise UpgradeError("a writer has run since the read began")


class SeqLock(Generic[T]):
    """A sequence lock guarding one value."""

    def __init__(self, data: T) -> None:
        self._lock = RawSeqLock()
        self._data = data

    def __repr__(self) -> str:
        return f"SeqLock({self._lock!r})"

    def write_lock(self) -> WriteGuard[T]:
        """Acquire a writer's lock."""
        return WriteGuard(self, self._lock.write_lock())

    def read_lock(self) -> ReadGuard[T]:
        """Begin an optimistic read; it must end with ``finish`` or ``upgrade``."""
        return ReadGuard(self, self._lock.read_begin())

    def read(self, f: Callable[[T], R]) -> R | None:
        """Call ``f`` on the value and return its result, or None if a writer intervened."""
        guard = self.read_lock()
        result = f(guard.value)
        return result if guard.finish() else None


class WriteGuard(Generic[T]):
    """A held writer's lock; release it with ``release`` or a ``with`` block."""

    def __init__(self, lock: SeqLock[T], seq: int) -> None:
        self._lock = lock
        self._seq = seq
        self._released = False

    def __repr__(self) -> str:
        return f"WriteGuard(seq={self._seq}, released={self._released})"

    def __enter__(self) -> WriteGuard[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._released:
            self.release()

    @property
    def seq(self) -> int:
        """The sequence at which the lock was taken."""
        return self._seq

    @property
    def value(self) -> T:
        """The guarded value."""
        self._check()
        return self._lock._data

    @value.setter
    def value(self, data: T) -> None:
        self._check()
        self._lock._data = data

    def release(self) -> None:
        """Release the writer's lock."""
        self._check()
        self._released = True
        self._lock._lock.write_unlock(self._seq)

    def _check(self) -> None:
        if self._released:
            raise RuntimeError("write guard already released")


class ReadGuard(Generic[T]):
    """An optimistic read; end it with ``finish`` or ``upgrade``."""

    def __init__(self, lock: SeqLock[T], seq: int) -> None:
        self._lock = lock
        self._seq = seq
        self._done = False

    def __repr__(self) -> str:
        return f"ReadGuard(seq={self._seq}, done={self._done})"

    @property
    def seq(self) -> int:
        """The sequence at which the read began."""
        return self._seq

    @property
    def value(self) -> T:
        """The guarded value, possibly mid-write; validate before trusting it."""
        self._check()
        return self._lock._data

    def validate(self) -> bool:
        """Return whether no writer has run since the read began."""
        self._check()
        return self._lock._lock.read_validate(self._seq)

    def restart(self) -> None:
        """Begin the read again from the current sequence."""
        self._check()
        self._seq = self._lock._lock.read_begin()

    def finish(self) -> bool:
        """End the read and return whether it was valid."""
        self._check()
        self._done = True
        return self._lock._lock.read_validate(self._seq)

    def upgrade(self) -> WriteGuard[T]:
        """End the read by taking a writer's lock.

        Raises UpgradeError if a writer has run since the read began.
        """
        self._check()
        self._done = True
        self._lock._lock.upgrade(self._seq)
        return WriteGuard(self._lock, self._seq)

    def _check(self) -> None:
        if self._done:
            raise RuntimeError("read guard already finished")