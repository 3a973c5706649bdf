"""Verification code repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.verification import ValidateType, VerificationCode


class IVerificationCodeRepository(Protocol):
    """Repository interface for VerificationCode entities."""

    async def create(self, code: VerificationCode) -> VerificationCode:
        """Store a freshly issued code."""
        ...

    async def get_latest_usable(
        self, user_id: UUID, validate_type: ValidateType
    ) -> VerificationCode | None:
        """Get the newest unconsumed, unexpired code of this type."""
        ...

    async def consume(self, id: UUID) -> None:
        """Mark a code as used."""
        ...
