"""Outbound domain events: space audit trail, invitations and codes."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4


class AuditSpaceAction(StrEnum):
    """Audited space actions. Format: {entity}.{action}."""

    INVITE_MEMBER = "member.invited"
    REMOVE_MEMBER = "member.removed"
    RECOVER_RUBBISH_NODE = "rubbish_node.recovered"
    DELETE_RUBBISH_NODE = "rubbish_node.deleted"
    DISABLE_ATTACHMENT = "attachment.disabled"


@dataclass(frozen=True)
class DomainEvent:
    """Base class for events handed to the event publisher."""

    event_id: UUID = field(default_factory=uuid4, kw_only=True)
    occurred_at: datetime = field(default_factory=datetime.utcnow, kw_only=True)

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class AuditSpaceEvent(DomainEvent):
    """Something auditable happened inside a space."""

    action: AuditSpaceAction
    space_id: UUID
    user_id: UUID | None = None
    node_id: UUID | None = None
    member_ids: tuple[UUID, ...] = ()
    info: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class InvitationSentEvent(DomainEvent):
    """An invitation notice should be delivered to ``email``."""

    space_id: UUID
    inviter_user_id: UUID
    email: str
    member_id: UUID


@dataclass(frozen=True)
class VerificationCodeSentEvent(DomainEvent):
    """A verification code should be delivered to ``target``."""

    user_id: UUID
    validate_type: str
    target: str
    code: str = field(repr=False)
