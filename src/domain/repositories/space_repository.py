"""Space repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.space import Space


class ISpaceRepository(Protocol):
    """Repository interface for Space entities."""

    async def get(self, id: UUID) -> Space | None:
        """Get a space by ID."""
        ...

    async def create(self, space: Space) -> Space:
        """Create a new space."""
        ...
