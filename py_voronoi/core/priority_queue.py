"""Binary heap ordered by an arbitrary three-way comparator."""

import heapq
import itertools
from functools import cmp_to_key
from typing import Callable, Generic, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    """
    Min-heap (or max-heap with ``ascending=False``) over ``comparator``.

    Items that compare equal are popped in insertion order. Nothing is ever
    removed early; callers soft-delete by flagging items they no longer want.

    Args:
        comparator: Returns a negative number, zero, or a positive number as
            the first argument sorts before, with, or after the second
        ascending: Pop the smallest item first when True
        items: Initial contents
    """

    def __init__(
        self,
        comparator: Callable[[T, T], int],
        ascending: bool = True,
        items: Iterable[T] = (),
    ):
        if ascending:
            self._key = cmp_to_key(comparator)
        else:
            self._key = cmp_to_key(lambda a, b: comparator(b, a))
        self._counter = itertools.count()
        self._heap: List[Tuple[object, int, T]] = [
            (self._key(item), next(self._counter), item) for item in items
        ]
        heapq.heapify(self._heap)

    def push(self, item: T) -> None:
        heapq.heappush(self._heap, (self._key(item), next(self._counter), item))

    def pop(self) -> Optional[T]:
        """Remove and return the first item, or None if the queue is empty."""
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[2]

    def peek(self) -> Optional[T]:
        if not self._heap:
            return None
        return self._heap[0][2]

    def clear(self) -> None:
        self._heap.clear()

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
