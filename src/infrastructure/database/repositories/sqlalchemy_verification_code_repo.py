"""SQLAlchemy implementation of VerificationCode repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.verification import ValidateType, VerificationCode
from infrastructure.database.models import VerificationCodeModel


class SQLAlchemyVerificationCodeRepository:
    """SQLAlchemy implementation of IVerificationCodeRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, code: VerificationCode) -> VerificationCode:
        """Store a freshly issued code."""
        model = VerificationCodeModel(
            id=code.id,
            user_id=code.user_id,
            validate_type=code.validate_type.value,
            code_hash=code.code_hash,
            created_at=code.created_at,
            expires_at=code.expires_at,
            consumed_at=code.consumed_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def get_latest_usable(
        self, user_id: UUID, validate_type: ValidateType
    ) -> VerificationCode | None:
        """Get the newest unconsumed, unexpired code of this type."""
        stmt = (
            select(VerificationCodeModel)
            .where(
                VerificationCodeModel.user_id == user_id,
                VerificationCodeModel.validate_type == validate_type.value,
                VerificationCodeModel.consumed_at.is_(None),
                VerificationCodeModel.expires_at > datetime.utcnow(),
            )
            .order_by(VerificationCodeModel.created_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def consume(self, id: UUID) -> None:
        """Mark a code as used."""
        model = await self._session.get(VerificationCodeModel, id)
        if not model:
            raise ValueError(f"Verification code {id} not found")
        model.consumed_at = datetime.utcnow()
        await self._session.flush()

    def _to_entity(self, model: VerificationCodeModel) -> VerificationCode:
        """Convert ORM model to domain entity."""
        return VerificationCode(
            id=model.id,
            user_id=model.user_id,
            validate_type=ValidateType(model.validate_type),
            code_hash=model.code_hash,
            created_at=model.created_at,
            expires_at=model.expires_at,
            consumed_at=model.consumed_at,
        )
