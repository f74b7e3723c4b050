"""Bounded most-recently-opened document list."""

import logging
import threading

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 4


class RecencyCache:
    """
    Recently opened document IDs, newest first.

    Session-only: the cache starts empty and is never persisted.

    Thread Safety:
        Every operation holds a lock, so "document opened" notifications may
        arrive from any thread while ranking calls read the cache.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 0:
            raise ValueError(f"Recency capacity must be >= 0, got {capacity}")
        self._capacity = capacity
        self._items: list[str] = []
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, doc_id: str) -> None:
        """Move doc_id to the front, evicting the oldest entries past capacity."""
        with self._lock:
            items = [item for item in self._items if item != doc_id]
            items.insert(0, doc_id)
            self._items = items[: self._capacity]

    # Signature suited for registration as a "document opened" callback
    on_document_open = add

    def contains(self, doc_id: str) -> bool:
        with self._lock:
            return doc_id in self._items

    def __contains__(self, doc_id: object) -> bool:
        return isinstance(doc_id, str) and self.contains(doc_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def list(self) -> list[str]:
        """Copy of the cached IDs, newest first."""
        with self._lock:
            return list(self._items)

    def resize(self, capacity: int) -> None:
        """Change the capacity, dropping the oldest entries when shrinking."""
        if capacity < 0:
            raise ValueError(f"Recency capacity must be >= 0, got {capacity}")
        with self._lock:
            self._capacity = capacity
            if len(self._items) > capacity:
                logger.debug("Recency cache shrunk to %d entries", capacity)
                self._items = self._items[:capacity]

    def clear(self) -> None:
        with self._lock:
            self._items = []
