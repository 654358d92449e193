"""
Notification and messaging repositories.
"""

import uuid
from typing import List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import utc_now
from ..entities.notifications import Conversation, Message, Notification, NotificationPreference
from .base import Page, SQLModelRepository


class NotificationRepository(SQLModelRepository[Notification]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Notification)

    async def find_by_user(self, user_id: uuid.UUID, page: int, size: int) -> Page[Notification]:
        stmt = select(Notification).where(Notification.user_id == user_id).order_by(Notification.created_at.desc())
        return await self.paginate(stmt, page, size)

    async def find_unread_by_user(self, user_id: uuid.UUID) -> List[Notification]:
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .order_by(Notification.created_at.desc())
        )
        return await self.fetch_all(stmt)

    async def count_unread_by_user(self, user_id: uuid.UUID) -> int:
        stmt = select(func.count(Notification.id)).where(
            Notification.user_id == user_id, Notification.is_read.is_(False)
        )
        return int((await self.session.execute(stmt)).scalar_one())


class NotificationPreferenceRepository(SQLModelRepository[NotificationPreference]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, NotificationPreference)

    async def get_by_user(self, user_id: uuid.UUID) -> Optional[NotificationPreference]:
        return await self.fetch_one(select(NotificationPreference).where(NotificationPreference.user_id == user_id))


class ConversationRepository(SQLModelRepository[Conversation]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Conversation)

    async def find_between(
        self, participant1_id: uuid.UUID, participant2_id: uuid.UUID, listing_id: Optional[uuid.UUID]
    ) -> Optional[Conversation]:
        """Look up a conversation by its normalised participant pair and listing."""
        stmt = select(Conversation).where(
            Conversation.participant1_id == participant1_id,
            Conversation.participant2_id == participant2_id,
        )
        if listing_id is None:
            stmt = stmt.where(Conversation.listing_id.is_(None))
        else:
            stmt = stmt.where(Conversation.listing_id == listing_id)
        return await self.fetch_one(stmt)

    async def find_by_participant(self, user_id: uuid.UUID) -> List[Conversation]:
        stmt = (
            select(Conversation)
            .where(or_(Conversation.participant1_id == user_id, Conversation.participant2_id == user_id))
            .order_by(Conversation.last_message_at.desc())
        )
        return await self.fetch_all(stmt)


class MessageRepository(SQLModelRepository[Message]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Message)

    async def find_by_conversation(self, conversation_id: uuid.UUID, page: int, size: int) -> Page[Message]:
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc())
        )
        return await self.paginate(stmt, page, size)

    async def mark_read_for_recipient(self, conversation_id: uuid.UUID, recipient_id: uuid.UUID) -> None:
        stmt = (
            update(Message)
            .where(
                Message.conversation_id == conversation_id,
                Message.recipient_id == recipient_id,
                Message.is_read.is_(False),
            )
            .values(is_read=True, read_at=utc_now())
            .execution_options(synchronize_session="fetch")
        )
        await self.session.execute(stmt)
