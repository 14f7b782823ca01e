"""A thread-safe FIFO queue bounded by the total load of its items."""

from __future__ import annotations

import threading
from collections import deque
from typing import Generic, TypeVar

__all__ = ["ParallelBoundedQueue"]

T = TypeVar("T")


class ParallelBoundedQueue(Generic[T]):
    """FIFO queue where pop blocks while empty and push blocks while the load exceeds max_load."""

    def __init__(self, max_load: int):
        if max_load <= 0:
            raise ValueError(f"max_load must be positive, got {max_load}")
        self._max_load = max_load
        self._load = 0
        self._items: deque[tuple[T, int]] = deque()
        lock = threading.Lock()
        self._not_empty = threading.Condition(lock)
        self._not_full = threading.Condition(lock)

    @property
    def max_load(self) -> int:
        return self._max_load

    @property
    def current_load(self) -> int:
        with self._not_empty:
            return self._load

    def __len__(self) -> int:
        with self._not_empty:
            return len(self._items)

    def push(self, item: T, load: int) -> None:
        """Append an item carrying the given load, waiting while the queue is over its limit."""
        with self._not_full:
            while self._load > self._max_load:
                self._not_full.wait()
            self._items.append((item, load))
            self._load += load
            self._not_empty.notify_all()

    def pop(self) -> T:
        """Remove and return the oldest item, waiting while the queue is empty."""
        with self._not_empty:
            while not self._items:
                self._not_empty.wait()
            item, load = self._items.popleft()
            self._load -= load
            self._not_full.notify_all()
            return item