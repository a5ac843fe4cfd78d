"""A concurrent sorted set using fine-grained optimistic (sequence-lock) locking.

Readers take no locks: they record sequence numbers and validate them later,
so reading never blocks writers.
"""

from __future__ import annotations

from typing import Generic, Iterator, TypeVar

from ccprims.seqlock import ReadGuard, SeqLock, UpgradeError

T = TypeVar("T")


class ValidationError(Exception):
    """A concurrent write invalidated an optimistic read; start again from the head."""


class _Node(Generic[T]):
    __slots__ = ("data", "next")

    def __init__(self, data: T, next_node: _Node[T] | None) -> None:
        self.data = data
        self.next: SeqLock[_Node[T] | None] = SeqLock(next_node)


class _Cursor(Generic[T]):
    """An optimistic read of the link that points to ``curr``."""

    __slots__ = ("prev", "curr")

    def __init__(self, prev: ReadGuard[_Node[T] | None], curr: _Node[T] | None) -> None:
        self.prev = prev
        self.curr = curr

    def find(self, key: T) -> bool:
        """Move to the position of ``key``; return whether it is present.

        On success the read of ``prev`` is still open. Raises ValidationError,
        with every read closed, if a writer got in the way.
        """
        while True:
            curr = self.curr
            if curr is None or not curr.data < key:
                break
            succ = curr.next.read_lock()
            if not self.prev.finish():
                succ.finish()
                raise ValidationError("the list changed during the search")
            self.prev = succ
            self.curr = succ.value
        found = curr is not None and curr.data == key
        if not self.prev.validate():
            self.prev.finish()
            raise ValidationError("the list changed during the search")
        return found


class _Iter(Generic[T]):
    """Iterates optimistically; raises ValidationError when the read is invalidated."""

    __slots__ = ("_prev", "_curr", "_done")

    def __init__(self, cursor: _Cursor[T]) -> None:
        self._prev = cursor.prev
        self._curr = cursor.curr
        self._done = False

    def __iter__(self) -> _Iter[T]:
        return self

    def _close(self) -> None:
        self._done = True
        self._prev.finish()

    def __next__(self) -> T:
        if self._done:
            raise StopIteration
        if not self._prev.validate():
            self._close()
            raise ValidationError("the list changed during iteration; restart it")
        curr = self._curr
        if curr is None:
            self._close()
            raise StopIteration
        succ = curr.next.read_lock()
        if not self._prev.finish():
            succ.finish()
            self._done = True
            raise ValidationError("the list changed during iteration; restart it")
        self._prev = succ
        self._curr = succ.value
        return curr.data


class OptimisticFineGrainedListSet(Generic[T]):
    """A sorted singly linked list set whose links are guarded by sequence locks."""

    def __init__(self) -> None:
        self._head: SeqLock[_Node[T] | None] = SeqLock(None)

    def __repr__(self) -> str:
        return "OptimisticFineGrainedListSet()"

    def _head_cursor(self) -> _Cursor[T]:
        prev = self._head.read_lock()
        return _Cursor(prev, prev.value)

    def _find(self, key: T) -> tuple[bool, _Cursor[T]]:
        while True:
            cursor = self._head_cursor()
            try:
                return cursor.find(key), cursor
            except ValidationError:
                continue

    def contains(self, key: T) -> bool:
        """Return whether ``key`` is in the set."""
        while True:
            found, cursor = self._find(key)
            if cursor.prev.finish():
                return found

    def insert(self, key: T) -> bool:
        """Add ``key``; return False if it was already present."""
        while True:
            found, cursor = self._find(key)
            if found:
                if cursor.prev.finish():
                    return False
                continue
            try:
                write = cursor.prev.upgrade()
            except UpgradeError:
                continue
            with write:
                write.value = _Node(key, cursor.curr)
            return True

    def remove(self, key: T) -> bool:
        """Remove ``key``; return False if it was absent."""
        while True:
            found, cursor = self._find(key)
            if not found:
                if cursor.prev.finish():
                    return False
                continue
            try:
                write = cursor.prev.upgrade()
            except UpgradeError:
                continue
            curr = cursor.curr
            assert curr is not None
            # Locking the removed node's link invalidates readers positioned on it.
            with write, curr.next.write_lock() as succ:
                write.value = succ.value
            return True

    def iter(self) -> Iterator[T]:
        """Iterate over the elements in ascending order.

        ``next`` raises ValidationError when a concurrent write invalidates the
        iteration; the caller must then start a new one.
        """
        return _Iter(self._head_cursor())

    def __iter__(self) -> Iterator[T]:
        return self.iter()

    def __contains__(self, key: object) -> bool:
        return self.contains(key)  # type: ignore[arg-type]