"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Profile:
    """Domain entity for a user account."""

    id: UUID = field(default_factory=uuid4)
    email: str = ""
    mobile: str | None = None
    display_name: str | None = None
    password_hash: str | None = None
    password_changed_at: datetime | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at
