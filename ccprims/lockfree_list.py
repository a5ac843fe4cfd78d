"""A sorted singly linked list that is safe for concurrent use without locks.

Deletion is two-step: a node is first marked as logically removed through its
``next`` link, then unlinked from its predecessor. The three search strategies
differ in how they deal with marked nodes met along the way.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

from ccprims.atomic import Atomic

K = TypeVar("K")
V = TypeVar("V")


class CursorInvalidated(Exception):
    """The list changed under a cursor; the operation must be retried from the head."""


class Node(Generic[K, V]):
    """A list node: a key, its value, and a link to the next node.

    The link holds ``(next_node, marked)``; ``marked`` is True once the node
    has been logically removed.
    """

    __slots__ = ("key", "value", "next")

    def __init__(self, key: K, value: V) -> None:
        self.key = key
        self.value = value
        self.next: Atomic[tuple[Node[K, V] | None, bool]] = Atomic((None, False))

    def __repr__(self) -> str:
        return f"Node(key={self.key!r}, value={self.value!r})"


_Link = Atomic  # the ``next`` field of a node, or the head of the list


class Cursor(Generic[K, V]):
    """A position in the list: the link that leads to ``curr``, and ``curr`` itself."""

    __slots__ = ("_prev", "_curr")

    def __init__(self, prev: Atomic, curr: Node[K, V] | None) -> None:
        self._prev = prev
        self._curr = curr

    def __repr__(self) -> str:
        return f"Cursor(curr={self._curr!r})"

    def __copy__(self) -> Cursor[K, V]:
        return Cursor(self._prev, self._curr)

    @property
    def curr(self) -> Node[K, V] | None:
        """The node the cursor points at, or None at the end of the list."""
        return self._curr

    def find_harris(self, key: K) -> bool:
        """Move to ``key``, unlinking the whole chain of marked nodes before it at once.

        Returns whether ``key`` was found. Raises CursorInvalidated if the
        cleanup could not be done.
        """
        prev_next = self._curr
        while True:
            curr_node = self._curr
            if curr_node is None:
                found = False
                break
            nxt, marked = curr_node.next.load()
            if marked:
                self._curr = nxt
                continue
            if curr_node.key < key:
                self._curr = nxt
                self._prev = curr_node.next
                prev_next = nxt
            elif curr_node.key == key:
                found = True
                break
            else:
                found = False
                break

        if prev_next is self._curr:
            return found

        if not self._prev.compare_exchange((prev_next, False), (self._curr, False))[0]:
            raise CursorInvalidated("the predecessor changed during cleanup")
        return found

    def find_harris_michael(self, key: K) -> bool:
        """Move to ``key``, unlinking each marked node as soon as it is met.

        Returns whether ``key`` was found. Raises CursorInvalidated if an
        unlink fails.
        """
        while True:
            curr_node = self._curr
            if curr_node is None:
                return False
            nxt, marked = curr_node.next.load()
            if marked:
                if not self._prev.compare_exchange((curr_node, False), (nxt, False))[0]:
                    raise CursorInvalidated("the predecessor changed during cleanup")
                self._curr = nxt
                continue
            if curr_node.key < key:
                self._prev = curr_node.next
                self._curr = nxt
            elif curr_node.key == key:
                return True
            else:
                return False

    def find_harris_herlihy_shavit(self, key: K) -> bool:
        """Move to ``key`` without cleaning anything up; never invalidated.

        Returns whether ``key`` was found and is not marked as removed.
        """
        while True:
            curr_node = self._curr
            if curr_node is None:
                return False
            if curr_node.key < key:
                self._curr = curr_node.next.load()[0]
                self._prev = curr_node.next
            elif curr_node.key == key:
                return not curr_node.next.load()[1]
            else:
                return False

    def lookup(self) -> V:
        """Return the value of the current node.

        Raises LookupError if the cursor is at the end of the list.
        """
        if self._curr is None:
            raise LookupError("cursor is at the end of the list")
        return self._curr.value

    def insert(self, node: Node[K, V]) -> None:
        """Link ``node`` in just before the current node and move onto it.

        Raises CursorInvalidated if the list changed at this position; the
        node is then left unlinked and may be inserted again.
        """
        node.next.store((self._curr, False))
        if not self._prev.compare_exchange((self._curr, False), (node, False))[0]:
            raise CursorInvalidated("the predecessor changed before insertion")
        self._curr = node

    def delete(self) -> V:
        """Remove the current node and return its value.

        Raises CursorInvalidated if another thread removed it first.
        """
        curr_node = self._curr
        if curr_node is None:
            raise LookupError("cursor is at the end of the list")
        while True:
            nxt, marked = curr_node.next.load()
            if marked:
                raise CursorInvalidated("the node was already removed")
            if curr_node.next.compare_exchange((nxt, False), (nxt, True))[0]:
                break
        self._prev.compare_exchange((curr_node, False), (nxt, False))
        return curr_node.value


_Find = Callable[[Cursor[Any, Any], Any], bool]


class List(Generic[K, V]):
    """A sorted map kept as a lock-free singly linked list."""

    def __init__(self) -> None:
        self._head: Atomic[tuple[Node[K, V] | None, bool]] = Atomic((None, False))

    def __repr__(self) -> str:
        return "List()"

    def head(self) -> Cursor[K, V]:
        """Return a cursor at the start of the list."""
        return Cursor(self._head, self._head.load()[0])

    def _find(self, key: K, find: _Find) -> tuple[bool, Cursor[K, V]]:
        while True:
            cursor = self.head()
            try:
                return find(cursor, key), cursor
            except CursorInvalidated:
                continue

    def _lookup(self, key: K, find: _Find) -> V | None:
        found, cursor = self._find(key, find)
        return cursor.lookup() if found else None

    def _insert(self, key: K, value: V, find: _Find) -> bool:
        node = Node(key, value)
        while True:
            found, cursor = self._find(key, find)
            if found:
                return False
            try:
                cursor.insert(node)
            except CursorInvalidated:
                continue
            return True

    def _delete(self, key: K, find: _Find) -> V | None:
        while True:
            found, cursor = self._find(key, find)
            if not found:
                return None
            try:
                return cursor.delete()
            except CursorInvalidated:
                continue

    def harris_lookup(self, key: K) -> V | None:
        """Return the value stored under ``key``, or None."""
        return self._lookup(key, Cursor.find_harris)

    def harris_insert(self, key: K, value: V) -> bool:
        """Insert ``key``; return False if it was already present."""
        return self._insert(key, value, Cursor.find_harris)

    def harris_delete(self, key: K) -> V | None:
        """Remove ``key`` and return its value, or None if it was absent."""
        return self._delete(key, Cursor.find_harris)

    def harris_michael_lookup(self, key: K) -> V | None:
        """Return the value stored under ``key``, or None."""
        return self._lookup(key, Cursor.find_harris_michael)

    def harris_michael_insert(self, key: K, value: V) -> bool:
        """Insert ``key``; return False if it was already present."""
        return self._insert(key, value, Cursor.find_harris_michael)

    def harris_michael_delete(self, key: K) -> V | None:
        """Remove ``key`` and return its value, or None if it was absent."""
        return self._delete(key, Cursor.find_harris_michael)

    def harris_herlihy_shavit_lookup(self, key: K) -> V | None:
        """Return the value stored under ``key``, or None, without cleaning up."""
        return self._lookup(key, Cursor.find_harris_herlihy_shavit)