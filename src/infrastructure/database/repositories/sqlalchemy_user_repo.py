"""SQLAlchemy implementation of the user directory."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel


class SQLAlchemyUserRepository:
    """SQLAlchemy implementation of IUserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Profile | None:
        """Get an account by ID."""
        model = await self._session.get(ProfileModel, id)
        return self._to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Profile | None:
        """Get an account by (normalised) email."""
        stmt = select(ProfileModel).where(ProfileModel.email == email.strip().lower())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, profile: Profile) -> Profile:
        """Create a new account."""
        model = ProfileModel(
            id=profile.id,
            email=profile.email.strip().lower(),
            mobile=profile.mobile,
            display_name=profile.display_name,
            password_hash=profile.password_hash,
            password_changed_at=profile.password_changed_at,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update_password(self, id: UUID, password_hash: str, changed_at: datetime) -> None:
        """Store a new password hash."""
        model = await self._session.get(ProfileModel, id)
        if not model:
            raise ValueError(f"Profile {id} not found")
        model.password_hash = password_hash
        model.password_changed_at = changed_at
        await self._session.flush()

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            email=model.email,
            mobile=model.mobile,
            display_name=model.display_name,
            password_hash=model.password_hash,
            password_changed_at=model.password_changed_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
