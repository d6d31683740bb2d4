"""A thread-safe queue with an optional size policy and end-of-data signalling."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import Generic, Iterable, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class DataStorePolicy:
    """How many items a queue may hold and which end is trimmed when it overflows."""

    max_size: Optional[int] = None
    pop_front: bool = True

    def regulate(self, queue: deque) -> None:
        """Trim the queue in place so that it holds at most ``max_size`` items."""
        if self.max_size is None or len(queue) < self.max_size:
            return
        excess = len(queue) - self.max_size
        for _ in range(excess):
            if self.pop_front:
                queue.popleft()
            else:
                queue.pop()

    @classmethod
    def unlimited(cls) -> "DataStorePolicy":
        """A policy that never trims."""
        return cls()

    @classmethod
    def upto(cls, max_size: int, pop_front: bool = True) -> "DataStorePolicy":
        """A policy that keeps at most ``max_size`` items."""
        return cls(max_size=max_size, pop_front=pop_front)


class ConcurrentVector(Generic[T]):
    """A lock-protected FIFO container shared between producer and consumer threads."""

    def __init__(self, policy: Optional[DataStorePolicy] = None) -> None:
        self._policy = policy if policy is not None else DataStorePolicy.unlimited()
        self._values: deque = deque()
        self._cond = threading.Condition()
        self._end_of_data = False

    def submit_end_of_data(self) -> None:
        """Signal that no more data will arrive and wake all waiting consumers."""
        with self._cond:
            self._end_of_data = True
            self._cond.notify_all()

    def empty(self) -> bool:
        with self._cond:
            return not self._values

    def __len__(self) -> int:
        with self._cond:
            return len(self._values)

    def push_back(self, value: T) -> None:
        with self._cond:
            self._values.append(value)
            self._policy.regulate(self._values)
            self._cond.notify()

    def clear(self) -> None:
        with self._cond:
            self._values.clear()

    def front(self) -> T:
        with self._cond:
            if not self._values:
                raise IndexError("front of an empty ConcurrentVector")
            return self._values[0]

    def back(self) -> T:
        with self._cond:
            if not self._values:
                raise IndexError("back of an empty ConcurrentVector")
            return self._values[-1]

    def extend(self, values: Iterable[T]) -> None:
        """Append all given values at the end."""
        new_values = list(values)
        if not new_values:
            return
        with self._cond:
            self._values.extend(new_values)
            self._policy.regulate(self._values)
            self._cond.notify_all()

    def pop(self) -> Optional[T]:
        """Remove and return the first item, or None if the queue is empty."""
        with self._cond:
            if not self._values:
                return None
            return self._values.popleft()

    def pop_wait(self) -> Optional[T]:
        """Wait for an item and return it; None once empty and end of data is signalled."""
        with self._cond:
            while True:
                if self._values:
                    return self._values.popleft()
                if self._end_of_data:
                    return None
                self._cond.wait()

    def get_all_and_clear_wait(self) -> list[T]:
        """Wait for data and take all of it; an empty list once end of data is signalled."""
        with self._cond:
            while True:
                if self._values:
                    items = list(self._values)
                    self._values.clear()
                    return items
                if self._end_of_data:
                    return []
                self._cond.wait()

    def get_all_and_clear(self) -> list[T]:
        """Take all items without waiting."""
        with self._cond:
            items = list(self._values)
            self._values.clear()
            return items

    def get_and_clear(self, num_max: int) -> list[T]:
        """Take up to ``num_max`` items from the front."""
        with self._cond:
            count = min(num_max, len(self._values))
            return [self._values.popleft() for _ in range(count)]