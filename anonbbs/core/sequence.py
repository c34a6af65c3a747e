"""
AnonBBS Message ID Sequence

One counter shared by every kind of post.
"""

import threading
import logging

logger = logging.getLogger(__name__)


class IDAllocator:
    """Monotonic id allocator. Ids start at 0 and are never reused."""

    def __init__(self, start: int = 0):
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> int:
        """Atomically return the current counter value and advance it by one."""
        with self._lock:
            allocated = self._next
            self._next += 1
        return allocated

    def next_ids(self, count: int) -> list[int]:
        """Atomically reserve ``count`` consecutive ids."""
        if count < 1:
            raise ValueError("count must be positive")

        with self._lock:
            first = self._next
            self._next += count
        return list(range(first, first + count))

    def peek(self) -> int:
        """Return the next id to be issued without allocating it."""
        with self._lock:
            return self._next
