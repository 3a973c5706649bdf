"""Attachment repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.attachment import Attachment


class IAttachmentRepository(Protocol):
    """Repository interface for Attachment entities."""

    async def get_by_token(self, token: str) -> Attachment | None:
        """Get an attachment by its storage token."""
        ...

    async def create(self, attachment: Attachment) -> Attachment:
        """Create a new attachment."""
        ...

    async def total_size(self, space_id: UUID) -> int:
        """Sum of sizes of enabled attachments in a space."""
        ...

    async def update(self, attachment: Attachment) -> Attachment:
        """Persist moderation state of an attachment."""
        ...
