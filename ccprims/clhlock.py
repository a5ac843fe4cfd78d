"""A CLH queue lock."""

from __future__ import annotations

from ccprims.atomic import Atomic, Backoff


class _Node:
    __slots__ = ("locked",)

    def __init__(self, locked: bool) -> None:
        self.locked = Atomic(locked)

    def __repr__(self) -> str:
        return f"_Node(locked={self.locked.load()})"


class ClhLock:
    """CLH lock: each waiter spins on the node of its predecessor.

    ``lock`` returns a token that must be handed back to ``unlock``.
    """

    def __init__(self) -> None:
        self._tail = Atomic(_Node(False))

    def __repr__(self) -> str:
        return f"ClhLock(tail={self._tail.load()!r})"

    def lock(self) -> _Node:
        """Acquire the lock and return the token for releasing it."""
        node = _Node(True)
        prev = self._tail.swap(node)
        backoff = Backoff()
        while prev.locked.load():
            backoff.snooze()
        return node

    def unlock(self, token: _Node) -> None:
        """Release the lock held with ``token``."""
        token.locked.store(False)