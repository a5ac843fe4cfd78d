"""Michael-Scott lock-free queue, usable with any number of producers and consumers."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from ccprims.atomic import Atomic, Backoff

T = TypeVar("T")

_EMPTY: Any = object()


class _Node(Generic[T]):
    __slots__ = ("data", "next")

    def __init__(self, data: Any) -> None:
        self.data = data
        self.next: Atomic[_Node[T] | None] = Atomic(None)


class Queue(Generic[T]):
    """A FIFO queue kept as a singly linked list with a sentinel node at the front.

    The tail pointer may lag behind the real tail; every operation helps move it on.
    """

    def __init__(self) -> None:
        sentinel: _Node[T] = _Node(_EMPTY)
        self._head: Atomic[_Node[T]] = Atomic(sentinel)
        self._tail: Atomic[_Node[T]] = Atomic(sentinel)

    def __repr__(self) -> str:
        return f"Queue(empty={self.is_empty()})"

    def push(self, t: T) -> None:
        """Add ``t`` to the back of the queue."""
        new: _Node[T] = _Node(t)
        while True:
            tail = self._tail.load()
            nxt = tail.next.load()
            if nxt is not None:
                # The tail is lagging: help move it forward and try again.
                self._tail.compare_exchange(tail, nxt)
                continue
            if tail.next.compare_exchange(None, new)[0]:
                self._tail.compare_exchange(tail, new)
                return

    def _take(self) -> Any:
        while True:
            head = self._head.load()
            nxt = head.next.load()
            if nxt is None:
                return _EMPTY
            tail = self._tail.load()
            if tail is head:
                self._tail.compare_exchange(tail, nxt)
            if self._head.compare_exchange(head, nxt)[0]:
                # ``nxt`` is the new sentinel; its value now belongs to us alone.
                result = nxt.data
                nxt.data = _EMPTY
                return result

    def try_pop(self) -> T | None:
        """Remove and return the front value, or None if the queue is observed empty."""
        result = self._take()
        return None if result is _EMPTY else result

    def pop(self) -> T:
        """Remove and return the front value, waiting until one is available."""
        backoff = Backoff()
        while True:
            result = self._take()
            if result is not _EMPTY:
                return result
            backoff.snooze()

    def is_empty(self) -> bool:
        """Return whether the queue holds no values."""
        return self._head.load().next.load() is None