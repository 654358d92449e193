"""
Direct messaging between users.

Conversations are keyed by the ordered participant pair plus an optional
listing, so both directions of a chat about one listing share a thread.
"""

import uuid
from typing import Dict, FrozenSet, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database import utc_now
from agrilink.core.database.entities import Conversation, Message
from agrilink.core.database.repositories import ConversationRepository, MessageRepository, Page, UserRepository
from agrilink.core.exceptions import BadRequestException, ResourceNotFoundException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import UserRole
from agrilink.core.models.io.notifications import ConversationRead, MessageCreate

logger = get_logger(__name__)

PREVIEW_LENGTH = 100

# Sender role -> roles it may message
ALLOWED_RECIPIENTS: Dict[str, FrozenSet[str]] = {
    UserRole.CUSTOMER.value: frozenset({UserRole.FARMER.value}),
    UserRole.BUYER.value: frozenset({UserRole.FARMER.value}),
    UserRole.FARMER.value: frozenset(
        {UserRole.CUSTOMER.value, UserRole.BUYER.value, UserRole.MANAGER.value, UserRole.ADMIN.value}
    ),
    UserRole.MANAGER.value: frozenset({UserRole.FARMER.value}),
    UserRole.ADMIN.value: frozenset({UserRole.FARMER.value, UserRole.MANAGER.value}),
}


def normalise_pair(a: uuid.UUID, b: uuid.UUID) -> Tuple[uuid.UUID, uuid.UUID]:
    return (a, b) if str(a) < str(b) else (b, a)


def message_preview(content: str) -> str:
    if len(content) <= PREVIEW_LENGTH:
        return content
    return content[:PREVIEW_LENGTH] + "..."


def to_conversation_read(conversation: Conversation, user_id: uuid.UUID) -> ConversationRead:
    return ConversationRead(
        id=conversation.id,
        other_participant_id=conversation.other_participant(user_id),
        listing_id=conversation.listing_id,
        last_message_preview=conversation.last_message_preview,
        last_message_at=conversation.last_message_at,
        unread_count=conversation.unread_count_for(user_id),
        created_at=conversation.created_at,
    )


class MessagingService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.conversations = ConversationRepository(session)
        self.messages = MessageRepository(session)
        self.users = UserRepository(session)

    async def _check_roles(self, sender_role: Optional[str], recipient_id: uuid.UUID) -> None:
        recipient = await self.users.get_by_id(recipient_id)
        if recipient is None:
            raise ResourceNotFoundException("User", "id", recipient_id)
        allowed = ALLOWED_RECIPIENTS.get(sender_role or "", frozenset())
        if not allowed.intersection(recipient.role_list()):
            recipient_role = recipient.role_list()[0] if recipient.role_list() else "UNKNOWN"
            raise BadRequestException(
                f"Users with role {sender_role} cannot send messages to users with role {recipient_role}"
            )

    async def send_message(self, sender_id: uuid.UUID, sender_role: Optional[str], request: MessageCreate) -> Message:
        if request.recipient_id == sender_id:
            raise BadRequestException("Cannot send message to yourself")
        await self._check_roles(sender_role, request.recipient_id)

        first, second = normalise_pair(sender_id, request.recipient_id)
        conversation = await self.conversations.find_between(first, second, request.listing_id)
        if conversation is None:
            conversation = await self.conversations.create(
                Conversation(participant1_id=first, participant2_id=second, listing_id=request.listing_id)
            )

        message = await self.messages.create(
            Message(
                conversation_id=conversation.id,
                sender_id=sender_id,
                recipient_id=request.recipient_id,
                content=request.content,
            )
        )
        conversation.last_message_preview = message_preview(request.content)
        conversation.last_message_at = message.created_at
        conversation.increment_unread(request.recipient_id)
        await self.conversations.update(conversation)
        await self.session.commit()
        logger.info(
            f"Message {message.id} sent in conversation {conversation.id}",
            extra={"conversation_id": str(conversation.id), "sender_id": str(sender_id)},
        )
        return message

    async def get_conversations(self, user_id: uuid.UUID) -> List[ConversationRead]:
        return [to_conversation_read(c, user_id) for c in await self.conversations.find_by_participant(user_id)]

    async def _get_for_participant(self, conversation_id: uuid.UUID, user_id: uuid.UUID) -> Conversation:
        conversation = await self.conversations.get_by_id(conversation_id)
        if conversation is None:
            raise ResourceNotFoundException("Conversation", "id", conversation_id)
        if not conversation.has_participant(user_id):
            raise BadRequestException("You are not a participant in this conversation")
        return conversation

    async def get_conversation(self, conversation_id: uuid.UUID, user_id: uuid.UUID) -> ConversationRead:
        return to_conversation_read(await self._get_for_participant(conversation_id, user_id), user_id)

    async def get_messages(self, conversation_id: uuid.UUID, user_id: uuid.UUID, page: int, size: int) -> Page[Message]:
        await self._get_for_participant(conversation_id, user_id)
        return await self.messages.find_by_conversation(conversation_id, page, size)

    async def mark_conversation_read(self, conversation_id: uuid.UUID, user_id: uuid.UUID) -> ConversationRead:
        conversation = await self._get_for_participant(conversation_id, user_id)
        conversation.reset_unread(user_id)
        await self.conversations.update(conversation)
        await self.messages.mark_read_for_recipient(conversation_id, user_id)
        await self.session.commit()
        return to_conversation_read(conversation, user_id)

    async def get_total_unread(self, user_id: uuid.UUID) -> int:
        conversations = await self.conversations.find_by_participant(user_id)
        return sum(conversation.unread_count_for(user_id) for conversation in conversations)
