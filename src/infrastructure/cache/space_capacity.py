"""In-memory TTL cache of per-space usage."""

import time
from dataclasses import dataclass
from threading import Lock
from uuid import UUID

from domain.entities.space import SpaceUsage


@dataclass
class _Entry:
    usage: SpaceUsage
    created_at: float

    def is_expired(self, ttl_seconds: float) -> bool:
        return time.monotonic() - self.created_at > ttl_seconds


class InMemorySpaceCapacityCache:
    """Process-local ISpaceCapacityCache with a fixed size and TTL.

    Oldest entries are evicted first once ``max_size`` is reached.
    """

    def __init__(self, max_size: int = 1024, ttl_seconds: float = 300) -> None:
        self._entries: dict[UUID, _Entry] = {}
        self._max_size = max_size
        self._ttl_seconds = ttl_seconds
        self._lock = Lock()

    def get(self, space_id: UUID) -> SpaceUsage | None:
        with self._lock:
            entry = self._entries.get(space_id)
            if entry is None:
                return None
            if entry.is_expired(self._ttl_seconds):
                del self._entries[space_id]
                return None
            return entry.usage

    def set(self, space_id: UUID, usage: SpaceUsage) -> None:
        with self._lock:
            if len(self._entries) >= self._max_size and space_id not in self._entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
            self._entries[space_id] = _Entry(usage=usage, created_at=time.monotonic())

    def invalidate(self, space_id: UUID) -> None:
        with self._lock:
            self._entries.pop(space_id, None)

    def __len__(self) -> int:
        return len(self._entries)
