"""A concurrent sorted set using hand-over-hand (lock-coupling) locking."""

from __future__ import annotations

import threading
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class _Link(Generic[T]):
    """A pointer to the next node, guarded by its own lock."""

    __slots__ = ("lock", "node")

    def __init__(self, node: _Node[T] | None) -> None:
        self.lock = threading.Lock()
        self.node = node


class _Node(Generic[T]):
    __slots__ = ("data", "next")

    def __init__(self, data: T, next_node: _Node[T] | None) -> None:
        self.data = data
        self.next: _Link[T] = _Link(next_node)


class _Cursor(Generic[T]):
    """A held lock on the link that points to the current node."""

    __slots__ = ("link",)

    def __init__(self, link: _Link[T]) -> None:
        self.link = link

    def find(self, key: T) -> bool:
        """Move to the position of ``key``; return whether it is present."""
        while True:
            node = self.link.node
            if node is None or not node.data < key:
                return node is not None and node.data == key
            node.next.lock.acquire()
            self.link.lock.release()
            self.link = node.next

    def release(self) -> None:
        self.link.lock.release()


class FineGrainedListSet(Generic[T]):
    """A sorted singly linked list set where every link has its own lock.

    An iteration holds a lock on its current position, so an iterator that
    is only partly consumed blocks writers behind it until it is closed.
    """

    def __init__(self) -> None:
        self._head: _Link[T] = _Link(None)

    def __repr__(self) -> str:
        return "FineGrainedListSet()"

    def _find(self, key: T) -> tuple[bool, _Cursor[T]]:
        self._head.lock.acquire()
        cursor = _Cursor(self._head)
        try:
            return cursor.find(key), cursor
        except BaseException:
            cursor.release()
            raise

    def contains(self, key: T) -> bool:
        """Return whether ``key`` is in the set."""
        found, cursor = self._find(key)
        cursor.release()
        return found

    def insert(self, key: T) -> bool:
        """Add ``key``; return False if it was already present."""
        found, cursor = self._find(key)
        try:
            if found:
                return False
            cursor.link.node = _Node(key, cursor.link.node)
            return True
        finally:
            cursor.release()

    def remove(self, key: T) -> bool:
        """Remove ``key``; return False if it was absent."""
        found, cursor = self._find(key)
        try:
            if not found:
                return False
            node = cursor.link.node
            assert node is not None
            with node.next.lock:
                cursor.link.node = node.next.node
            return True
        finally:
            cursor.release()

    def iter(self) -> Iterator[T]:
        """Iterate over the elements in ascending order."""
        link = self._head
        link.lock.acquire()
        try:
            while (node := link.node) is not None:
                node.next.lock.acquire()
                link.lock.release()
                link = node.next
                yield node.data
        finally:
            link.lock.release()

    def __iter__(self) -> Iterator[T]:
        return self.iter()

    def __contains__(self, key: object) -> bool:
        return self.contains(key)  # type: ignore[arg-type]