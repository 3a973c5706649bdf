"""Member repository protocol."""

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from domain.entities.member import Member


class IMemberRepository(Protocol):
    """Repository interface for Member entities."""

    async def get(self, id: UUID) -> Member | None:
        """Get a member by ID, including soft-deleted rows."""
        ...

    async def find_including_deleted(self, space_id: UUID, email: str) -> Member | None:
        """Get the membership row for (space, email) whether or not it is soft-deleted."""
        ...

    async def get_by_space_and_email(self, space_id: UUID, email: str) -> Member | None:
        """Get the live membership for (space, email)."""
        ...

    async def get_by_user_and_space(self, user_id: UUID, space_id: UUID) -> Member | None:
        """Get the live membership of an account in a space."""
        ...

    async def list_for_space(self, space_id: UUID) -> list[Member]:
        """Get all live memberships of a space."""
        ...

    async def create(self, member: Member) -> Member:
        """Insert a membership. Raises IntegrityError on a (space, email) clash."""
        ...

    async def restore(self, id: UUID, user_id: UUID | None = None) -> Member:
        """Clear the soft-delete marker and force the row back to inactive."""
        ...

    async def update(self, member: Member) -> Member:
        """Persist activation fields and identity link of a member."""
        ...

    async def soft_delete(self, space_id: UUID, ids: Iterable[UUID]) -> list[UUID]:
        """Soft-delete live members of the space. Returns the ids actually deleted."""
        ...
