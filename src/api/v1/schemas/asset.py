"""Pydantic schemas for asset moderation callbacks."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AuditResultRequest(BaseModel):
    """Moderation verdict for an uploaded attachment."""

    disable: bool = Field(..., description="Whether the attachment must be disabled")
    result: dict[str, Any] | None = Field(None, description="Raw verdict from the moderation service")


class AttachmentResponse(BaseModel):
    """Schema for Attachment response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    space_id: UUID
    token: str
    name: str
    mime_type: str
    size: int
    is_disabled: bool
    audited_at: datetime | None = None
