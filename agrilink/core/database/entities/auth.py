"""
Authentication entity models.

Holds user accounts and the one-time tokens issued by the password reset flow.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlmodel import DateTime, Field

from ..base import Base, TimestampedBase, utc_now


class User(TimestampedBase, table=True):
    """A login account.

    ``roles`` is stored as a comma separated list of role names
    (e.g. ``"FARMER,ADMIN"``); use :meth:`role_list` to read it.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    phone: Optional[str] = Field(default=None, max_length=32, unique=True)
    password_hash: str = Field(max_length=255)
    roles: str = Field(default="CUSTOMER", max_length=255, description="Comma separated role names")
    enabled: bool = Field(default=True)

    def role_list(self) -> List[str]:
        return [role for role in self.roles.split(",") if role]

    def has_role(self, role: str) -> bool:
        return role in self.role_list()

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, roles={self.roles})"


class PasswordResetToken(Base, table=True):
    """Single-use token sent to a user who asked to reset their password.

    Table: password_reset_tokens
    """

    __tablename__ = "password_reset_tokens"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    token: str = Field(max_length=64, unique=True, index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    expires_at: datetime = Field(sa_type=DateTime)
    used: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utc_now()) > self.expires_at

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        return not self.used and not self.is_expired(now)

    def __repr__(self) -> str:
        return f"PasswordResetToken(user_id={self.user_id}, used={self.used}, expires_at={self.expires_at})"
