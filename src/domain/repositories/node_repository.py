"""Node repository protocol."""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.node import Node


class INodeRepository(Protocol):
    """Repository interface for Node entities."""

    async def get(self, id: UUID) -> Node | None:
        """Get a node by ID."""
        ...

    async def get_root(self, space_id: UUID) -> Node | None:
        """Get the root folder of a space."""
        ...

    async def get_children_ids(self, parent_ids: Iterable[UUID]) -> list[UUID]:
        """Get the ids of all direct children of the given nodes."""
        ...

    async def count_children(self, parent_id: UUID) -> int:
        """Count live direct children of a node."""
        ...

    async def count_live(self, space_id: UUID) -> int:
        """Count nodes of a space that are not in the rubbish bin."""
        ...

    async def list_rubbish(
        self,
        space_id: UUID,
        *,
        deleted_by: UUID | None = None,
        deleted_after: datetime | None = None,
        deleted_before: datetime | None = None,
        cursor: tuple[datetime, UUID] | None = None,
        limit: int = 20,
    ) -> list[Node]:
        """Rubbish nodes newest first, optionally after a (deleted_at, id) cursor."""
        ...

    async def create(self, node: Node) -> Node:
        """Create a new node."""
        ...

    async def update(self, node: Node) -> Node:
        """Persist placement and rubbish state of a node."""
        ...

    async def delete_many(self, ids: Iterable[UUID]) -> int:
        """Permanently delete nodes. Returns count of deleted rows."""
        ...
