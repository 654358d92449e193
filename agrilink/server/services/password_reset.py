"""
Password reset flow.

Tokens are random UUID strings valid for ``PASSWORD_RESET_EXPIRY_MINUTES``.
Issuing a new token, or using one, invalidates every other open token of the
same user. E-mail delivery is out of scope; the reset link is logged.
"""

import uuid
from datetime import timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database import utc_now
from agrilink.core.database.entities import PasswordResetToken
from agrilink.core.database.repositories import PasswordResetTokenRepository, UserRepository
from agrilink.core.exceptions import BadRequestException
from agrilink.core.logging_config import get_logger
from agrilink.server.core.config import settings
from agrilink.server.security import hash_password

logger = get_logger(__name__)


class PasswordResetService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.users = UserRepository(session)
        self.tokens = PasswordResetTokenRepository(session)

    async def forgot_password(self, email: str) -> Optional[str]:
        """Issue a reset link for ``email``.

        Unknown addresses are accepted silently so the endpoint cannot be used
        to enumerate accounts.

        Returns:
            The reset link, or None when no account matches.
        """
        user = await self.users.get_by_email(email.strip().lower())
        if user is None:
            logger.info("Password reset requested for unknown email")
            return None

        await self.tokens.invalidate_for_user(user.id)
        token = PasswordResetToken(
            token=str(uuid.uuid4()),
            user_id=user.id,
            expires_at=utc_now() + timedelta(minutes=settings.password_reset_expiry_minutes),
        )
        await self.tokens.create(token)
        await self.session.commit()

        link = f"{settings.frontend_url}/reset-password?token={token.token}"
        logger.info(f"Password reset link for user {user.id}: {link}", extra={"user_id": str(user.id)})
        return link

    async def validate_reset_token(self, token: str) -> bool:
        reset_token = await self.tokens.get_by_token(token)
        return reset_token is not None and reset_token.is_valid(utc_now())

    async def reset_password(self, token: str, new_password: str, confirm_password: str) -> None:
        if new_password != confirm_password:
            raise BadRequestException("Passwords do not match")

        reset_token = await self.tokens.get_by_token(token)
        if reset_token is None or not reset_token.is_valid(utc_now()):
            raise BadRequestException("Invalid or expired reset token")

        user = await self.users.get_by_id(reset_token.user_id)
        if user is None:
            raise BadRequestException("Invalid or expired reset token")

        user.password_hash = hash_password(new_password)
        await self.users.update(user)
        reset_token.used = True
        await self.tokens.update(reset_token)
        await self.tokens.invalidate_for_user(user.id)
        await self.session.commit()
        logger.info(f"Password reset completed for user {user.id}", extra={"user_id": str(user.id)})

    async def cleanup_expired_tokens(self) -> int:
        deleted = await self.tokens.delete_expired(utc_now())
        await self.session.commit()
        if deleted:
            logger.info(f"Deleted {deleted} expired password reset tokens", extra={"deleted": deleted})
        return deleted
