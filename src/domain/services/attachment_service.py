"""Attachment service layer: registration and moderation verdicts."""

import logging
from collections.abc import Callable
from typing import Any, Optional
from uuid import UUID

from core.exceptions import AttachmentNotFoundError
from domain.entities.attachment import Attachment
from domain.entities.audit import AuditSpaceAction, AuditSpaceEvent
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.event_publisher import IEventPublisher, publish_quietly
from domain.services.space_capacity import ISpaceCapacityCache

logger = logging.getLogger(__name__)


class AttachmentService:
    """Service layer for attachment moderation."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        capacity_cache: Optional[ISpaceCapacityCache] = None,
        event_publisher: Optional[IEventPublisher] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._capacity = capacity_cache
        self._events = event_publisher

    async def register(
        self,
        space_id: UUID,
        token: str,
        name: str,
        mime_type: str = "application/octet-stream",
        size: int = 0,
    ) -> Attachment:
        """Record an uploaded attachment."""
        async with self._uow_factory() as uow:
            created = await uow.attachments.create(
                Attachment(
                    space_id=space_id,
                    token=token,
                    name=name,
                    mime_type=mime_type,
                    size=size,
                )
            )
            await uow.commit()

        if self._capacity is not None:
            self._capacity.invalidate(space_id)
        return created

    async def apply_audit_result(
        self,
        token: str,
        disable: bool,
        result: dict[str, Any] | None = None,
    ) -> Attachment:
        """Store a moderation verdict and disable the attachment if requested.

        Args:
            token: Storage token of the audited attachment.
            disable: Whether moderation asks for the file to be disabled.
            result: Raw per-scene moderation results.

        Raises:
            AttachmentNotFoundError: If no attachment has this token.
        """
        async with self._uow_factory() as uow:
            attachment = await uow.attachments.get_by_token(token)
            if not attachment:
                raise AttachmentNotFoundError(token)

            newly_disabled = disable and not attachment.is_disabled
            attachment.apply_audit(disable, result)
            updated = await uow.attachments.update(attachment)
            await uow.commit()

        if newly_disabled:
            logger.info("Attachment %s disabled by moderation", token)
            if self._capacity is not None:
                self._capacity.invalidate(updated.space_id)
            await publish_quietly(
                self._events,
                AuditSpaceEvent(
                    action=AuditSpaceAction.DISABLE_ATTACHMENT,
                    space_id=updated.space_id,
                    info={"token": token},
                ),
            )
        return updated
