"""A first-come, first-served ticket lock."""

from __future__ import annotations

from ccprims.atomic import Atomic, Backoff

_USIZE_MASK = (1 << 64) - 1


class TicketLock:
    """A lock that serves waiting threads in the order they arrived."""

    def __init__(self) -> None:
        self._curr = Atomic(0)
        self._next = Atomic(0)

    def __repr__(self) -> str:
        return f"TicketLock(curr={self._curr.load()}, next={self._next.load()})"

    def lock(self) -> int:
        """Take a ticket, wait for its turn, and return it."""
        ticket = self._next.fetch_add(1)
        backoff = Backoff()
        while self._curr.load() != ticket:
            backoff.snooze()
        return ticket

    def unlock(self, ticket: int) -> None:
        """Release the lock held with ``ticket``, admitting the next ticket."""
        self._curr.store((ticket + 1) & _USIZE_MASK)