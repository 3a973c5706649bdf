"""Member domain entity and invitation outcomes."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class MemberStatus(StrEnum):
    """Persisted activation status. Always mirrors ``Member.is_active``."""

    ACTIVE = "active"
    INACTIVE = "inactive"


def normalize_email(email: str) -> str:
    """Canonical form used for every (space, email) lookup."""
    return email.strip().lower()


@dataclass
class Member:
    """Domain entity binding a person (by email, optionally an account) to a space."""

    space_id: UUID
    email: str
    id: UUID = field(default_factory=uuid4)
    user_id: UUID | None = None
    name: str = ""
    is_active: bool = False
    is_point: bool = True
    is_admin: bool = False
    status: MemberStatus = MemberStatus.INACTIVE
    deleted_at: datetime | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        self.email = normalize_email(self.email)
        if not self.name:
            self.name = self.email.split("@", 1)[0]
        self.status = MemberStatus.ACTIVE if self.is_active else MemberStatus.INACTIVE

    @property
    def is_deleted(self) -> bool:
        """Soft-deleted rows are hidden from normal queries but keep their id."""
        return self.deleted_at is not None

    @classmethod
    def invited(cls, space_id: UUID, email: str, user_id: UUID | None = None) -> "Member":
        """A fresh membership created by an email invitation."""
        return cls(
            space_id=space_id,
            email=email,
            user_id=user_id,
            is_active=False,
            is_point=True,
        )

    def activate(self, user_id: UUID | None = None) -> None:
        """The invited person has claimed the membership."""
        if user_id is not None:
            self.user_id = user_id
        self.is_active = True
        self.status = MemberStatus.ACTIVE
        self.updated_at = datetime.utcnow()


class InvitationOutcome(StrEnum):
    """What an invitation did to one email address."""

    CREATED = "created"
    RESTORED = "restored"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass
class EmailInvitation:
    """Result of inviting a single email address."""

    email: str
    outcome: InvitationOutcome
    member_id: UUID | None = None
    error_code: str | None = None


@dataclass
class InvitationResult:
    """Per-email outcomes of a batch invitation, in input order."""

    space_id: UUID
    items: list[EmailInvitation] = field(default_factory=list)

    @property
    def failed(self) -> list[EmailInvitation]:
        return [item for item in self.items if item.outcome == InvitationOutcome.FAILED]

    def for_email(self, email: str) -> EmailInvitation | None:
        email = normalize_email(email)
        return next((item for item in self.items if item.email == email), None)
