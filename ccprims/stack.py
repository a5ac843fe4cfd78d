"""Treiber's lock-free stack."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ccprims.atomic import Atomic

T = TypeVar("T")


@dataclass(frozen=True, eq=False, slots=True)
class _Cell:
    """An immutable stack cell; cells are compared by identity."""

    data: Any
    below: _Cell | None


class Stack(Generic[T]):
    """A lock-free stack usable by any number of producers and consumers."""

    def __init__(self) -> None:
        self._top: Atomic[_Cell | None] = Atomic(None)

    def __repr__(self) -> str:
        return f"Stack(empty={self.is_empty()})"

    def push(self, t: T) -> None:
        """Push a value on top of the stack."""
        while True:
            top = self._top.load()
            if self._top.compare_exchange(top, _Cell(t, top))[0]:
                return

    def pop(self) -> T | None:
        """Remove and return the top value, or None if the stack is empty."""
        while (top := self._top.load()) is not None:
            if self._top.compare_exchange(top, top.below)[0]:
                return top.data
        return None

    def is_empty(self) -> bool:
        """Return whether the stack holds no values."""
        return self._top.load() is None