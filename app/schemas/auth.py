"""Password reset schemas."""
from pydantic import BaseModel
from typing import Optional


class PasswordResetRequest(BaseModel):
    """Schema for requesting a password reset email."""

    email: str


class PasswordUpdateRequest(BaseModel):
    """Schema for setting a new password."""

    access_token: str
    password: str
    confirm_password: str


class PasswordResult(BaseModel):
    """Outcome of a password flow step."""

    success: bool
    error: Optional[str] = None
    redirect_to: Optional[str] = None
    redirect_after_seconds: Optional[int] = None
