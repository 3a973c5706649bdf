"""SQLAlchemy implementation of Attachment repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.attachment import Attachment
from infrastructure.database.models import AttachmentModel


class SQLAlchemyAttachmentRepository:
    """SQLAlchemy implementation of IAttachmentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_token(self, token: str) -> Attachment | None:
        """Get an attachment by its storage token."""
        stmt = select(AttachmentModel).where(AttachmentModel.token == token)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, attachment: Attachment) -> Attachment:
        """Create a new attachment."""
        model = AttachmentModel(
            id=attachment.id,
            space_id=attachment.space_id,
            token=attachment.token,
            name=attachment.name,
            mime_type=attachment.mime_type,
            size=attachment.size,
            is_disabled=attachment.is_disabled,
            audit_result=attachment.audit_result,
            audited_at=attachment.audited_at,
            created_at=attachment.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def total_size(self, space_id: UUID) -> int:
        """Sum of sizes of enabled attachments in a space."""
        stmt = select(func.coalesce(func.sum(AttachmentModel.size), 0)).where(
            AttachmentModel.space_id == space_id,
            AttachmentModel.is_disabled.is_(False),
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def update(self, attachment: Attachment) -> Attachment:
        """Persist moderation state of an attachment."""
        model = await self._session.get(AttachmentModel, attachment.id)
        if not model:
            raise ValueError(f"Attachment {attachment.id} not found")

        model.is_disabled = attachment.is_disabled
        model.audit_result = attachment.audit_result
        model.audited_at = attachment.audited_at

        await self._session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: AttachmentModel) -> Attachment:
        """Convert ORM model to domain entity."""
        return Attachment(
            id=model.id,
            space_id=model.space_id,
            token=model.token,
            name=model.name,
            mime_type=model.mime_type,
            size=model.size,
            is_disabled=model.is_disabled,
            audit_result=model.audit_result,
            audited_at=model.audited_at,
            created_at=model.created_at,
        )
