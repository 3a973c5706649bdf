"""Pydantic schemas for account credential API."""

from pydantic import BaseModel, Field, field_validator

from core.security import is_valid_password
from domain.entities.verification import ValidateType


class SendCodeRequest(BaseModel):
    """Schema for requesting a verification code."""

    type: ValidateType


class UpdatePasswordRequest(BaseModel):
    """Schema for updating the password with a verification code."""

    type: ValidateType
    code: str = Field(..., min_length=4, max_length=8)
    password: str = Field(..., min_length=8, max_length=32)

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        v = v.strip()
        if not v.isdigit():
            raise ValueError("Code must be numeric")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not is_valid_password(v):
            raise ValueError("Password must be 8-32 characters and contain letters and digits")
        return v
