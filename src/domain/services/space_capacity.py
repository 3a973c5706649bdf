"""Space capacity cache protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.space import SpaceUsage


class ISpaceCapacityCache(Protocol):
    """Cache of per-space usage. Writers invalidate after changing usage."""

    def get(self, space_id: UUID) -> SpaceUsage | None:
        ...

    def set(self, space_id: UUID, usage: SpaceUsage) -> None:
        ...

    def invalidate(self, space_id: UUID) -> None:
        ...
