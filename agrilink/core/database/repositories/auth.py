"""
Auth repositories: user accounts and password reset tokens.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.auth import PasswordResetToken, User
from .base import SQLModelRepository


class UserRepository(SQLModelRepository[User]):
    """Repository for user accounts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.fetch_one(select(User).where(User.email == email))

    async def exists_by_email(self, email: str) -> bool:
        return await self.get_by_email(email) is not None

    async def exists_by_phone(self, phone: str) -> bool:
        return await self.fetch_one(select(User).where(User.phone == phone)) is not None

    async def find_enabled_by_role(self, role: str) -> List[User]:
        """Enabled users holding ``role``.

        Roles live in a comma separated column, so the match is done on the
        loaded rows rather than in SQL.
        """
        stmt = select(User).where(User.enabled.is_(True), User.roles.contains(role)).order_by(User.created_at.asc())
        users = await self.fetch_all(stmt)
        return [user for user in users if user.has_role(role)]


class PasswordResetTokenRepository(SQLModelRepository[PasswordResetToken]):
    """Repository for single-use password reset tokens."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PasswordResetToken)

    async def get_by_token(self, token: str) -> Optional[PasswordResetToken]:
        return await self.fetch_one(select(PasswordResetToken).where(PasswordResetToken.token == token))

    async def invalidate_for_user(self, user_id: uuid.UUID) -> None:
        """Mark every unused token of a user as used."""
        stmt = (
            update(PasswordResetToken)
            .where(PasswordResetToken.user_id == user_id, PasswordResetToken.used.is_(False))
            .values(used=True)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.execute(stmt)

    async def delete_expired(self, now: datetime) -> int:
        stmt = delete(PasswordResetToken).where(PasswordResetToken.expires_at < now)
        result = await self.session.execute(stmt)
        return int(result.rowcount or 0)
