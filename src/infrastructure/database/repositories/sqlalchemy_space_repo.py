"""SQLAlchemy implementation of Space repository."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.space import Space
from infrastructure.database.models import SpaceModel


class SQLAlchemySpaceRepository:
    """SQLAlchemy implementation of ISpaceRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Space | None:
        """Get a space by ID."""
        model = await self._session.get(SpaceModel, id)
        return self._to_entity(model) if model else None

    async def create(self, space: Space) -> Space:
        """Create a new space."""
        model = SpaceModel(
            id=space.id,
            name=space.name,
            owner_id=space.owner_id,
            created_at=space.created_at,
            updated_at=space.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    def _to_entity(self, model: SpaceModel) -> Space:
        """Convert ORM model to domain entity."""
        return Space(
            id=model.id,
            name=model.name,
            owner_id=model.owner_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
