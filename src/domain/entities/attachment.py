"""Attachment domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4


@dataclass
class Attachment:
    """Domain entity for an uploaded attachment subject to moderation."""

    space_id: UUID
    token: str
    name: str
    mime_type: str = "application/octet-stream"
    size: int = 0
    id: UUID = field(default_factory=uuid4)
    is_disabled: bool = False
    audit_result: dict[str, Any] | None = None
    audited_at: datetime | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def apply_audit(self, disable: bool, result: dict[str, Any] | None) -> None:
        """Record a moderation verdict. A disable verdict is never undone here."""
        self.audit_result = result
        self.audited_at = datetime.utcnow()
        if disable:
            self.is_disabled = True
