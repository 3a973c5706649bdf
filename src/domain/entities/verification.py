"""Verification code domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum
from uuid import UUID, uuid4

# Default verification code lifetime: 10 minutes
VERIFICATION_CODE_TTL_MINUTES = 10


class ValidateType(StrEnum):
    """Channel a verification code was delivered over."""

    SMS_CODE = "sms_code"
    EMAIL_CODE = "email_code"


@dataclass
class VerificationCode:
    """A one-time code proving control of a phone number or mailbox."""

    user_id: UUID
    validate_type: ValidateType
    code_hash: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    expires_at: datetime = field(
        default_factory=lambda: datetime.utcnow()
        + timedelta(minutes=VERIFICATION_CODE_TTL_MINUTES)
    )
    consumed_at: datetime | None = None

    @property
    def is_expired(self) -> bool:
        return datetime.utcnow() > self.expires_at

    @property
    def is_usable(self) -> bool:
        return self.consumed_at is None and not self.is_expired

    def consume(self) -> None:
        self.consumed_at = datetime.utcnow()
