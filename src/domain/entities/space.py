"""Space domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Space:
    """Domain entity for a Space."""

    name: str
    owner_id: UUID
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass(frozen=True)
class SpaceContext:
    """The space a request operates on and the caller's membership in it."""

    space_id: UUID
    user_id: UUID
    member_id: UUID
    is_admin: bool = False


@dataclass(frozen=True)
class SpaceUsage:
    """Capacity figures of a space, served from the capacity cache."""

    node_count: int
    attachment_bytes: int
