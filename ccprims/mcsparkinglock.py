"""An MCS queue lock whose waiters sleep instead of spinning."""

from __future__ import annotations

import threading

from ccprims.atomic import Atomic, Backoff


class _Node:
    __slots__ = ("locked", "next", "wakeup")

    def __init__(self) -> None:
        self.locked = Atomic(True)
        self.next: Atomic[_Node | None] = Atomic(None)
        self.wakeup = threading.Event()

    def __repr__(self) -> str:
        return f"_Node(locked={self.locked.load()})"


class McsParkingLock:
    """MCS lock whose waiters block until their predecessor wakes them.

    ``lock`` returns a token that must be handed back to ``unlock``.
    """

    def __init__(self) -> None:
        self._tail: Atomic[_Node | None] = Atomic(None)

    def __repr__(self) -> str:
        return f"McsParkingLock(tail={self._tail.load()!r})"

    def lock(self) -> _Node:
        """Acquire the lock and return the token for releasing it."""
        node = _Node()
        prev = self._tail.swap(node)
        if prev is None:
            return node

        prev.next.store(node)
        while node.locked.load():
            node.wakeup.wait()
        return node

    def unlock(self, token: _Node) -> None:
        """Release the lock held with ``token``, waking the next waiter."""
        successor = token.next.load()
        if successor is None:
            if self._tail.compare_exchange(token, None)[0]:
                return
            backoff = Backoff()
            while (successor := token.next.load()) is None:
                backoff.snooze()
        successor.locked.store(False)
        successor.wakeup.set()