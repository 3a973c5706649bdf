"""Node domain entities and node permissions."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, StrEnum
from uuid import UUID, uuid4


class NodeType(StrEnum):
    """Kinds of workbench nodes."""

    ROOT = "root"
    FOLDER = "folder"
    DATASHEET = "datasheet"
    FORM = "form"
    DASHBOARD = "dashboard"


class NodeRole(StrEnum):
    """Role reported to the client alongside node info."""

    READER = "reader"
    EDITOR = "editor"
    MANAGER = "manager"


class NodePermission(Enum):
    """Operations gated by the node permission check."""

    CREATE_NODE = "create_node"
    MANAGE_RUBBISH = "manage_rubbish"


@dataclass
class Node:
    """Domain entity for a workbench node (folder, datasheet, ...)."""

    space_id: UUID
    name: str
    node_type: NodeType
    created_by: UUID | None = None
    parent_id: UUID | None = None
    id: UUID = field(default_factory=uuid4)
    is_rubbish: bool = False
    deleted_at: datetime | None = None
    deleted_by: UUID | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_root(self) -> bool:
        return self.node_type == NodeType.ROOT

    @property
    def is_folder(self) -> bool:
        return self.node_type in (NodeType.ROOT, NodeType.FOLDER)

    def move_to_rubbish(self, member_id: UUID) -> None:
        now = datetime.utcnow()
        self.is_rubbish = True
        self.deleted_at = now
        self.deleted_by = member_id
        self.updated_at = now

    def recover(self, parent_id: UUID) -> None:
        self.is_rubbish = False
        self.deleted_at = None
        self.deleted_by = None
        self.parent_id = parent_id
        self.updated_at = datetime.utcnow()


@dataclass
class NodeInfo:
    """Read model returned after node operations."""

    node_id: UUID
    space_id: UUID
    parent_id: UUID | None
    name: str
    node_type: NodeType
    role: NodeRole
    child_count: int = 0
    created_at: datetime | None = None


@dataclass
class RubbishNode:
    """Read model for an entry in the rubbish bin."""

    node_id: UUID
    name: str
    node_type: NodeType
    parent_id: UUID | None
    deleted_at: datetime
    deleted_by: UUID | None
    retention_days_left: int
