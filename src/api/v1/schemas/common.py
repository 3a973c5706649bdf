"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error_code: str
    message: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


def normalize_email_field(v: str) -> str:
    """Basic email validation shared by request schemas."""
    v = v.strip().lower()
    local, _, domain = v.partition("@")
    if not local or "." not in domain:
        raise ValueError("Invalid email address")
    return v
