"""Pydantic schemas for Member API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api.v1.schemas.common import normalize_email_field


class InviteMembersRequest(BaseModel):
    """Schema for inviting members by email."""

    emails: list[str] = Field(..., min_length=1, max_length=100)

    @field_validator("emails")
    @classmethod
    def validate_emails(cls, v: list[str]) -> list[str]:
        return [normalize_email_field(email) for email in v]


class RemoveMembersRequest(BaseModel):
    """Schema for removing members from a space."""

    member_ids: list[UUID] = Field(..., min_length=1, max_length=100)


class MemberResponse(BaseModel):
    """Schema for Member response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    space_id: UUID
    user_id: UUID | None = None
    email: str
    name: str
    is_active: bool
    is_point: bool
    is_admin: bool
    status: str
    created_at: datetime


class MemberListResponse(BaseModel):
    """Schema for list of Members response."""

    data: list[MemberResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class InvitationItemResponse(BaseModel):
    """Outcome of inviting one email address."""

    email: str
    outcome: str
    member_id: UUID | None = None
    error_code: str | None = None


class InvitationResultResponse(BaseModel):
    """Schema for batch invitation response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "data": [
                    {
                        "email": "ada@example.com",
                        "outcome": "created",
                        "member_id": "123e4567-e89b-12d3-a456-426614174000",
                        "error_code": None,
                    }
                ],
                "meta": {"total": 1, "failed": 0},
            }
        },
    )

    data: list[InvitationItemResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class RemoveMembersResponse(BaseModel):
    """Schema for member removal response."""

    removed: int
