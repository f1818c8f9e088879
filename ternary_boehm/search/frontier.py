"""
Frontier
========

The worklist of unresolved candidates shared by the search and optimization
loops. Entries leave only through ``take`` and ``remove_if``; removal never
happens while a caller is iterating.

``take(0)`` and ``take(len - 1)`` preserve the order of the remaining
entries. Taking from the middle moves the front entry into the vacated slot,
which is harmless for policies that pick by key or at random.
"""

from collections import deque
from typing import Callable, Generic, Iterable, Iterator, List, TypeVar

T = TypeVar('T')


class Frontier(Generic[T]):
    """Double-ended worklist with collect-then-filter removal."""

    def __init__(self, items: Iterable[T] = ()):
        self._items = deque(items)

    def push_back(self, item: T) -> None:
        self._items.append(item)

    def extend_back(self, items: Iterable[T]) -> None:
        self._items.extend(items)

    def extend_front(self, items: Iterable[T]) -> None:
        """Push ``items`` to the front, keeping their given order."""
        self._items.extendleft(reversed(list(items)))

    def take(self, index: int = 0) -> T:
        size = len(self._items)
        if not 0 <= index < size:
            raise IndexError(f"index {index} out of range [0, {size})")
        if index == 0:
            return self._items.popleft()
        if index == size - 1:
            return self._items.pop()
        front = self._items.popleft()
        item = self._items[index - 1]
        self._items[index - 1] = front
        return item

    def remove_if(self, condition: Callable[[T], bool]) -> int:
        """Drop every entry satisfying ``condition``; return how many were dropped."""
        kept = [item for item in self._items if not condition(item)]
        removed = len(self._items) - len(kept)
        self._items = deque(kept)
        return removed

    def reorder(self, order: List[int]) -> None:
        items = list(self._items)
        self._items = deque(items[i] for i in order)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)
