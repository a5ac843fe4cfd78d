"""A test-and-set spin lock."""

from __future__ import annotations

from ccprims.atomic import Atomic, Backoff


class SpinLock:
    """A spin lock that busy-waits with backoff until the flag is free."""

    def __init__(self) -> None:
        self._inner = Atomic(False)

    def __repr__(self) -> str:
        return f"SpinLock(locked={self._inner.load()})"

    def lock(self) -> None:
        """Acquire the lock, spinning until it becomes available."""
        backoff = Backoff()
        while not self._inner.compare_exchange(False, True)[0]:
            backoff.snooze()

    def unlock(self, token: None = None) -> None:
        """Release the lock."""
        self._inner.store(False)

    def try_lock(self) -> bool:
        """Acquire the lock if it is free; return whether it was acquired."""
        return self._inner.compare_exchange(False, True)[0]