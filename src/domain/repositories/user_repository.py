"""User directory protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IUserRepository(Protocol):
    """Repository interface for user accounts (profiles)."""

    async def get(self, id: UUID) -> Profile | None:
        """Get an account by ID."""
        ...

    async def get_by_email(self, email: str) -> Profile | None:
        """Get an account by (normalised) email."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a new account."""
        ...

    async def update_password(self, id: UUID, password_hash: str, changed_at: datetime) -> None:
        """Store a new password hash."""
        ...
