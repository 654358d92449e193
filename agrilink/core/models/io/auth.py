"""
Authentication I/O models.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255, examples=["farmer@example.com"])
    password: str = Field(min_length=6, max_length=128)
    phone: Optional[str] = Field(default=None, max_length=32)
    roles: List[str] = Field(default_factory=list, description="Role names, e.g. ['FARMER']; defaults to CUSTOMER")


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserRead(BaseModel):
    """Public view of an account. ``name`` is derived from the e-mail address."""

    id: uuid.UUID
    email: str
    phone: Optional[str] = None
    name: str
    roles: List[str]
    enabled: bool
    created_at: datetime


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(description="Token lifetime in seconds")
    user_id: uuid.UUID
    email: str
    name: str
    roles: List[str]


class ForgotPasswordRequest(BaseModel):
    email: str = Field(min_length=1)


class ValidateResetTokenRequest(BaseModel):
    token: str = Field(min_length=1)


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)
    confirm_password: str = Field(min_length=1)


class TokenValidity(BaseModel):
    valid: bool
