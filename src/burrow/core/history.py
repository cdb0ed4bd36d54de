"""Bounded input/output history.

HistoryArray keeps the most recent ``max_size`` entries pushed into it.
Entries are numbered from 1 in push order and keep their number after
older entries have been evicted, matching the ``[N]`` numbers shown in
the prompt.

Example:
    >>> history = HistoryArray(max_size=2)
    >>> for line in ["a = 1", "b = 2", "a + b"]:
    ...     history.push(line)
    >>> history[-1]
    'a + b'
    >>> history[2]
    'b = 2'
    >>> history[1]
    Traceback (most recent call last):
    ...
    IndexError: history index 1 is out of range (retained: 2..3)
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from typing import Any, Generic, TypeVar, overload

T = TypeVar("T")

DEFAULT_MEMORY_SIZE = 100


class HistoryArray(Generic[T]):
    """Fixed-capacity FIFO buffer with stable, 1-based numbering.

    Positive indices are absolute entry numbers (1 is the first entry
    ever pushed). Negative indices count back from the newest entry.
    Slices use the same numbering and return a plain list, clipped to
    the entries still retained.
    """

    def __init__(self, max_size: int = DEFAULT_MEMORY_SIZE) -> None:
        if not isinstance(max_size, int) or max_size < 1:
            raise ValueError(f"max_size must be a positive integer, got {max_size!r}")
        self._max_size = max_size
        self._items: deque[T] = deque(maxlen=max_size)
        self._count = 0

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def count(self) -> int:
        """Total number of entries ever pushed (the newest entry's number)."""
        return self._count

    @property
    def first_index(self) -> int:
        """Number of the oldest retained entry."""
        return self._count - len(self._items) + 1

    def push(self, value: T) -> T:
        """Append a value, evicting the oldest entry when full."""
        self._items.append(value)
        self._count += 1
        return value

    def clear(self) -> None:
        """Drop all entries. Numbering continues from where it was."""
        self._items.clear()

    def to_list(self) -> list[T]:
        return list(self._items)

    def _position(self, index: int) -> int:
        if index < 0:
            position = len(self._items) + index
        elif index > 0:
            position = index - self.first_index
        else:
            position = -1
        if not 0 <= position < len(self._items):
            raise IndexError(
                f"history index {index} is out of range "
                f"(retained: {self.first_index}..{self._count})"
            )
        return position

    def _bound(self, index: int | None, default: int) -> int:
        if index is None:
            return default
        if index < 0:
            return max(0, len(self._items) + index)
        return min(max(0, index - self.first_index), len(self._items))

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index: int | slice) -> T | list[T]:
        if isinstance(index, slice):
            start = self._bound(index.start, 0)
            stop = self._bound(index.stop, len(self._items))
            return self.to_list()[start:stop : index.step]
        return self._items[self._position(index)]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, HistoryArray):
            return self.to_list() == other.to_list()
        if isinstance(other, list):
            return self.to_list() == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"HistoryArray(max_size={self._max_size}, items={self.to_list()!r})"

    def numbered(self) -> list[tuple[int, T]]:
        """Retained entries paired with their history numbers."""
        return list(enumerate(self._items, start=self.first_index))
