"""Pydantic schemas for Space API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateSpaceRequest(BaseModel):
    """Schema for creating a space."""

    name: str = Field(..., min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be blank")
        return v


class SpaceResponse(BaseModel):
    """Schema for Space response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Marketing",
                "owner_id": "456e4567-e89b-12d3-a456-426614174000",
                "created_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    name: str
    owner_id: UUID
    created_at: datetime


class SpaceUsageResponse(BaseModel):
    """Schema for space usage figures."""

    space_id: UUID
    node_count: int
    attachment_bytes: int
