"""Outbound event emission and the invitation notifier built on it."""

import logging
from typing import Protocol
from uuid import UUID

from domain.entities.audit import DomainEvent, InvitationSentEvent

logger = logging.getLogger(__name__)


class IEventPublisher(Protocol):
    """Hands domain events to an external consumer."""

    async def publish(self, event: DomainEvent) -> None:
        """Publish a single event."""
        ...


async def publish_quietly(publisher: IEventPublisher | None, event: DomainEvent) -> bool:
    """Publish after the state change is committed; failures are logged, not raised."""
    if publisher is None:
        return False
    try:
        await publisher.publish(event)
    except Exception:
        logger.exception("Failed to publish %s (%s)", event.name, event.event_id)
        return False
    return True


class InvitationNotifier:
    """Fire-and-forget "invitation sent" signal.

    Membership state has already been committed when the notifier runs, so
    a delivery problem never affects it.
    """

    def __init__(self, publisher: IEventPublisher) -> None:
        self._publisher = publisher

    async def invitation_sent(
        self,
        space_id: UUID,
        inviter_user_id: UUID,
        email: str,
        member_id: UUID,
    ) -> bool:
        return await publish_quietly(
            self._publisher,
            InvitationSentEvent(
                space_id=space_id,
                inviter_user_id=inviter_user_id,
                email=email,
                member_id=member_id,
            ),
        )
