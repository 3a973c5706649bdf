"""Unit tests for the in-memory space capacity cache."""

from unittest.mock import patch
from uuid import uuid4

from domain.entities.space import SpaceUsage
from infrastructure.cache import space_capacity
from infrastructure.cache.space_capacity import InMemorySpaceCapacityCache

USAGE = SpaceUsage(node_count=3, attachment_bytes=100)


class TestInMemorySpaceCapacityCache:
    def test_get_returns_stored_usage(self) -> None:
        cache = InMemorySpaceCapacityCache()
        space_id = uuid4()

        cache.set(space_id, USAGE)

        assert cache.get(space_id) == USAGE
        assert cache.get(uuid4()) is None

    def test_invalidate(self) -> None:
        cache = InMemorySpaceCapacityCache()
        space_id = uuid4()
        cache.set(space_id, USAGE)

        cache.invalidate(space_id)
        cache.invalidate(uuid4())

        assert cache.get(space_id) is None

    def test_entries_expire(self) -> None:
        cache = InMemorySpaceCapacityCache(ttl_seconds=10)
        space_id = uuid4()

        with patch.object(space_capacity.time, "monotonic", return_value=1000.0):
            cache.set(space_id, USAGE)
        with patch.object(space_capacity.time, "monotonic", return_value=1009.0):
            assert cache.get(space_id) == USAGE
        with patch.object(space_capacity.time, "monotonic", return_value=1011.0):
            assert cache.get(space_id) is None

        assert len(cache) == 0

    def test_evicts_oldest_when_full(self) -> None:
        cache = InMemorySpaceCapacityCache(max_size=2)
        first, second, third = uuid4(), uuid4(), uuid4()

        cache.set(first, USAGE)
        cache.set(second, USAGE)
        cache.set(third, USAGE)

        assert len(cache) == 2
        assert cache.get(first) is None
        assert cache.get(third) == USAGE

    def test_overwrite_does_not_evict(self) -> None:
        cache = InMemorySpaceCapacityCache(max_size=1)
        space_id = uuid4()

        cache.set(space_id, USAGE)
        cache.set(space_id, SpaceUsage(node_count=4, attachment_bytes=100))

        assert cache.get(space_id).node_count == 4
