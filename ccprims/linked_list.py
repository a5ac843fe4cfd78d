"""A doubly-linked list with constant-time pushes and pops at both ends."""

from __future__ import annotations

from typing import Any, Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")


class _Node(Generic[T]):
    __slots__ = ("element", "prev", "next")

    def __init__(self, element: T) -> None:
        self.element = element
        self.prev: _Node[T] | None = None
        self.next: _Node[T] | None = None


class LinkedList(Generic[T]):
    """A doubly-linked list of owned nodes.

    Elements can be pushed and popped at either end in constant time, and
    whole lists can be spliced onto either end in constant time.
    """

    __slots__ = ("_head", "_tail", "_len")

    def __init__(self, iterable: Iterable[T] = ()) -> None:
        self._head: _Node[T] | None = None
        self._tail: _Node[T] | None = None
        self._len = 0
        for element in iterable:
            self.push_back(element)

    # -- node-level operations -------------------------------------------

    def _push_front_node(self, node: _Node[T]) -> None:
        node.next = self._head
        node.prev = None
        if self._head is None:
            self._tail = node
        else:
            self._head.prev = node
        self._head = node
        self._len += 1

    def _pop_front_node(self) -> _Node[T] | None:
        node = self._head
        if node is None:
            return None
        self._head = node.next
        if self._head is None:
            self._tail = None
        else:
            self._head.prev = None
        node.next = None
        self._len -= 1
        return node

    def _push_back_node(self, node: _Node[T]) -> None:
        node.prev = self._tail
        node.next = None
        if self._tail is None:
            self._head = node
        else:
            self._tail.next = node
        self._tail = node
        self._len += 1

    def _pop_back_node(self) -> _Node[T] | None:
        node = self._tail
        if node is None:
            return None
        self._tail = node.prev
        if self._tail is None:
            self._head = None
        else:
            self._tail.next = None
        node.prev = None
        self._len -= 1
        return node

    def _take_from(self, other: LinkedList[T]) -> None:
        self._head, self._tail, self._len = other._head, other._tail, other._len
        other._head = other._tail = None
        other._len = 0

    # -- public interface ------------------------------------------------

    def append(self, other: LinkedList[T]) -> None:
        """Move every element of ``other`` to the end of this list, leaving ``other`` empty."""
        if other is self:
            raise ValueError("cannot append a list to itself")
        if self._tail is None:
            self._take_from(other)
            return
        if other._head is None:
            return
        self._tail.next = other._head
        other._head.prev = self._tail
        self._tail = other._tail
        self._len += other._len
        other._head = other._tail = None
        other._len = 0

    def prepend(self, other: LinkedList[T]) -> None:
        """Move every element of ``other`` to the start of this list, leaving ``other`` empty."""
        if other is self:
            raise ValueError("cannot prepend a list to itself")
        if self._head is None:
            self._take_from(other)
            return
        if other._tail is None:
            return
        other._tail.next = self._head
        self._head.prev = other._tail
        self._head = other._head
        self._len += other._len
        other._head = other._tail = None
        other._len = 0

    def iter(self) -> Iter[T]:
        """Return a double-ended iterator over the elements, front to back."""
        return Iter(self._head, self._tail, self._len)

    def iter_mut(self) -> IterMut[T]:
        """Return a double-ended iterator that can replace and insert elements."""
        return IterMut(self)

    def is_empty(self) -> bool:
        """Return whether the list holds no elements."""
        return self._head is None

    def clear(self) -> None:
        """Remove every element."""
        self._head = self._tail = None
        self._len = 0

    def front(self) -> T | None:
        """Return the first element, or None if the list is empty."""
        return None if self._head is None else self._head.element

    def back(self) -> T | None:
        """Return the last element, or None if the list is empty."""
        return None if self._tail is None else self._tail.element

    def push_front(self, elt: T) -> None:
        """Add an element at the front."""
        self._push_front_node(_Node(elt))

    def pop_front(self) -> T | None:
        """Remove and return the first element, or None if the list is empty."""
        node = self._pop_front_node()
        return None if node is None else node.element

    def push_back(self, elt: T) -> None:
        """Add an element at the back."""
        self._push_back_node(_Node(elt))

    def pop_back(self) -> T | None:
        """Remove and return the last element, or None if the list is empty."""
        node = self._pop_back_node()
        return None if node is None else node.element

    # -- Python protocols ------------------------------------------------

    def __len__(self) -> int:
        return self._len

    def __iter__(self) -> Iter[T]:
        return self.iter()

    def __reversed__(self) -> Iterator[T]:
        return reversed(self.iter())

    def __contains__(self, x: object) -> bool:
        return any(element == x for element in self)

    def __copy__(self) -> LinkedList[T]:
        return LinkedList(self)

    def __repr__(self) -> str:
        return "[" + ", ".join(repr(element) for element in self) + "]"

    __hash__ = None  # type: ignore[assignment]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return len(self) == len(other) and all(a == b for a, b in zip(self, other))

    def _partial_cmp(self, other: LinkedList[Any]) -> int | None:
        """Compare lexicographically; None when two elements are unordered."""
        mine, theirs = self.iter(), other.iter()
        while True:
            a_done = b_done = False
            try:
                a = next(mine)
            except StopIteration:
                a_done = True
            try:
                b = next(theirs)
            except StopIteration:
                b_done = True
            if a_done or b_done:
                return (b_done - a_done) if not (a_done and b_done) else 0
            if a < b:
                return -1
            if a > b:
                return 1
            if not a == b:
                return None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return self._partial_cmp(other) == -1

    def __le__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return self._partial_cmp(other) in (-1, 0)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return self._partial_cmp(other) == 1

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return self._partial_cmp(other) in (1, 0)


class _NodeIterator(Generic[T]):
    """Walks nodes from both ends until the two walks have covered every element."""

    __slots__ = ("_head", "_tail", "_len")

    def __init__(self, head: _Node[T] | None, tail: _Node[T] | None, length: int) -> None:
        self._head = head
        self._tail = tail
        self._len = length

    def _next_node(self) -> _Node[T]:
        node = self._head
        if self._len == 0 or node is None:
            raise StopIteration
        self._len -= 1
        self._head = node.next
        return node

    def _next_back_node(self) -> _Node[T]:
        node = self._tail
        if self._len == 0 or node is None:
            raise StopIteration
        self._len -= 1
        self._tail = node.prev
        return node

    def next_back(self) -> T:
        raise NotImplementedError

    def __iter__(self) -> _NodeIterator[T]:
        return self

    def __next__(self) -> T:
        return self._next_node().element

    def __reversed__(self) -> Iterator[T]:
        while True:
            try:
                yield self.next_back()
            except StopIteration:
                return

    def __len__(self) -> int:
        return self._len


class Iter(_NodeIterator[T]):
    """A double-ended iterator over the elements of a LinkedList."""

    __slots__ = ()

    def next_back(self) -> T:
        """Return the next element from the back; raise StopIteration when exhausted."""
        return self._next_back_node().element

    def __copy__(self) -> Iter[T]:
        return Iter(self._head, self._tail, self._len)

    def __repr__(self) -> str:
        return f"Iter({self._len})"


class IterMut(_NodeIterator[T]):
    """A double-ended iterator that can replace elements and insert new ones."""

    __slots__ = ("_list", "_last")

    def __init__(self, lst: LinkedList[T]) -> None:
        super().__init__(lst._head, lst._tail, lst._len)
        self._list = lst
        self._last: _Node[T] | None = None

    def __repr__(self) -> str:
        return f"IterMut({self._list!r}, {self._len})"

    def __next__(self) -> T:
        self._last = self._next_node()
        return self._last.element

    def next_back(self) -> T:
        """Return the next element from the back; raise StopIteration when exhausted."""
        self._last = self._next_back_node()
        return self._last.element

    def replace(self, value: T) -> T:
        """Replace the element most recently returned and return the old one."""
        if self._last is None:
            raise IndexError("no element has been returned yet")
        old, self._last.element = self._last.element, value
        return old

    def insert_next(self, element: T) -> None:
        """Insert ``element`` just after the element most recently returned by ``next``.

        The inserted element does not appear in the iteration.
        """
        head = self._head
        if head is None:
            self._list.push_back(element)
            return
        prev = head.prev
        if prev is None:
            self._list.push_front(element)
            return
        node = _Node(element)
        node.prev = prev
        node.next = head
        prev.next = node
        head.prev = node
        self._list._len += 1

    def peek_next(self) -> T | None:
        """Return the element ``next`` would return, without advancing, or None."""
        if self._len == 0 or self._head is None:
            return None
        return self._head.element

    def replace_next(self, value: T) -> T:
        """Replace the element ``next`` would return and return the old one."""
        if self._len == 0 or self._head is None:
            raise IndexError("no next element")
        old, self._head.element = self._head.element, value
        return old