"""Pydantic schemas for Node and rubbish bin API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.entities.node import NodeRole, NodeType


class CreateNodeRequest(BaseModel):
    """Schema for creating a node."""

    name: str = Field(..., min_length=1, max_length=255)
    node_type: NodeType = Field(NodeType.DATASHEET, alias="type")
    parent_id: UUID | None = Field(None, alias="parentId")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be blank")
        return v


class RecoverRubbishNodeRequest(BaseModel):
    """Schema for recovering a rubbish node."""

    node_id: UUID = Field(..., alias="nodeId")
    parent_id: UUID | None = Field(None, alias="parentId")

    model_config = ConfigDict(populate_by_name=True)


class NodeInfoResponse(BaseModel):
    """Schema for node info response."""

    model_config = ConfigDict(from_attributes=True)

    node_id: UUID
    space_id: UUID
    parent_id: UUID | None = None
    name: str
    node_type: NodeType
    role: NodeRole
    child_count: int
    created_at: datetime


class RubbishNodeResponse(BaseModel):
    """Schema for one rubbish bin entry."""

    model_config = ConfigDict(from_attributes=True)

    node_id: UUID
    name: str
    node_type: NodeType
    parent_id: UUID | None = None
    deleted_at: datetime
    deleted_by: UUID | None = None
    retention_days_left: int


class RubbishNodeListResponse(BaseModel):
    """Schema for a page of the rubbish bin."""

    data: list[RubbishNodeResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class DeleteRubbishNodeResponse(BaseModel):
    """Schema for permanent deletion response."""

    deleted_count: int
