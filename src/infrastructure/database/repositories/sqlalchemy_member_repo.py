"""SQLAlchemy implementation of Member repository."""

from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.member import Member, MemberStatus
from infrastructure.database.models import MemberModel


class SQLAlchemyMemberRepository:
    """SQLAlchemy implementation of IMemberRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Member | None:
        """Get a member by ID, including soft-deleted rows."""
        model = await self._session.get(MemberModel, id)
        return self._to_entity(model) if model else None

    async def find_including_deleted(self, space_id: UUID, email: str) -> Member | None:
        """Get the row for (space, email) whether or not it is soft-deleted."""
        stmt = select(MemberModel).where(
            MemberModel.space_id == space_id,
            MemberModel.email == email,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_space_and_email(self, space_id: UUID, email: str) -> Member | None:
        """Get the live membership for (space, email)."""
        stmt = select(MemberModel).where(
            MemberModel.space_id == space_id,
            MemberModel.email == email,
            MemberModel.deleted_at.is_(None),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_user_and_space(self, user_id: UUID, space_id: UUID) -> Member | None:
        """Get the live membership of an account in a space."""
        stmt = (
            select(MemberModel)
            .where(
                MemberModel.space_id == space_id,
                MemberModel.user_id == user_id,
                MemberModel.deleted_at.is_(None),
            )
            .order_by(MemberModel.is_active.desc(), MemberModel.created_at)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_for_space(self, space_id: UUID) -> list[Member]:
        """Get all live memberships of a space."""
        stmt = (
            select(MemberModel)
            .where(
                MemberModel.space_id == space_id,
                MemberModel.deleted_at.is_(None),
            )
            .order_by(MemberModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, member: Member) -> Member:
        """Insert a membership. Raises IntegrityError on a (space, email) clash."""
        model = self._to_model(member)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def restore(self, id: UUID, user_id: UUID | None = None) -> Member:
        """Clear the soft-delete marker and force the row back to inactive.

        ``is_point`` is deliberately left untouched.
        """
        model = await self._session.get(MemberModel, id)
        if not model:
            raise ValueError(f"Member {id} not found")

        model.deleted_at = None
        model.is_active = False
        model.status = MemberStatus.INACTIVE.value
        if model.user_id is None and user_id is not None:
            model.user_id = user_id
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def update(self, member: Member) -> Member:
        """Persist activation fields and identity link of a member."""
        model = await self._session.get(MemberModel, member.id)
        if not model:
            raise ValueError(f"Member {member.id} not found")

        model.user_id = member.user_id
        model.name = member.name
        model.is_active = member.is_active
        model.status = member.status.value
        model.is_admin = member.is_admin
        model.updated_at = member.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def soft_delete(self, space_id: UUID, ids: Iterable[UUID]) -> list[UUID]:
        """Soft-delete live members of the space. Returns the ids actually deleted."""
        ids = list(ids)
        if not ids:
            return []
        now = datetime.utcnow()
        stmt = (
            update(MemberModel)
            .where(
                MemberModel.space_id == space_id,
                MemberModel.id.in_(ids),
                MemberModel.deleted_at.is_(None),
            )
            .values(deleted_at=now, updated_at=now)
            .returning(MemberModel.id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        removed = list(result.scalars())
        await self._session.flush()
        # Keep identity-mapped instances in line with the bulk update.
        for member_id in removed:
            cached = await self._session.get(MemberModel, member_id)
            if cached is not None:
                await self._session.refresh(cached)
        return removed

    def _to_entity(self, model: MemberModel) -> Member:
        """Convert ORM model to domain entity."""
        return Member(
            id=model.id,
            space_id=model.space_id,
            user_id=model.user_id,
            email=model.email,
            name=model.name,
            is_active=model.is_active,
            is_point=model.is_point,
            is_admin=model.is_admin,
            status=MemberStatus(model.status),
            deleted_at=model.deleted_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Member) -> MemberModel:
        """Convert domain entity to ORM model."""
        return MemberModel(
            id=entity.id,
            space_id=entity.space_id,
            user_id=entity.user_id,
            email=entity.email,
            name=entity.name,
            is_active=entity.is_active,
            is_point=entity.is_point,
            is_admin=entity.is_admin,
            status=entity.status.value,
            deleted_at=entity.deleted_at,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
