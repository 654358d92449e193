"""
Messaging Endpoints.

Direct messages between customers and farmers, grouped into conversations.
Which roles may message each other is decided from the sender's token.
"""

import uuid
from typing import List

from fastapi import APIRouter, status

from agrilink.core.models.io import ApiResponse, PageResponse
from agrilink.core.models.io.notifications import ConversationRead, MessageCreate, MessageRead, UnreadCount
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.deps import MessagingServiceDep

from .params import DEFAULT_PAGE, DEFAULT_SIZE, PageParam, SizeParam

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[MessageRead],
    status_code=status.HTTP_201_CREATED,
    summary="Send Message",
    description="Send a message, opening a conversation with the recipient when none exists.",
    responses={400: {"description": "Messaging yourself, or the roles may not message each other"}},
)
async def send_message(request: MessageCreate, user: CurrentUserDep, service: MessagingServiceDep):
    """
    Send a message.

    - **recipient_id**: User receiving the message.
    - **content**: Message text.
    - **listing_id**: Optional listing the conversation is about; each listing gets its own thread.
    """
    message = await service.send_message(user.id, user.primary_role, request)
    return ApiResponse.ok(MessageRead.model_validate(message), "Message sent")


@router.get(
    "/conversations",
    response_model=ApiResponse[List[ConversationRead]],
    summary="My Conversations",
    description="Conversations the caller takes part in, most recently active first.",
)
async def list_conversations(user: CurrentUserDep, service: MessagingServiceDep):
    return ApiResponse.ok(await service.get_conversations(user.id))


@router.get("/conversations/{conversation_id}", response_model=ApiResponse[ConversationRead], summary="Get Conversation")
async def get_conversation(conversation_id: uuid.UUID, user: CurrentUserDep, service: MessagingServiceDep):
    return ApiResponse.ok(await service.get_conversation(conversation_id, user.id))


@router.get(
    "/conversations/{conversation_id}/messages",
    response_model=ApiResponse[PageResponse[MessageRead]],
    summary="Conversation Messages",
    description="Messages of a conversation, oldest first.",
)
async def list_messages(
    conversation_id: uuid.UUID,
    user: CurrentUserDep,
    service: MessagingServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    result = await service.get_messages(conversation_id, user.id, page, size)
    return ApiResponse.ok(PageResponse.from_page(result, MessageRead.model_validate))


@router.patch(
    "/conversations/{conversation_id}/read",
    response_model=ApiResponse[ConversationRead],
    summary="Mark Conversation Read",
)
async def mark_conversation_read(conversation_id: uuid.UUID, user: CurrentUserDep, service: MessagingServiceDep):
    return ApiResponse.ok(await service.mark_conversation_read(conversation_id, user.id))


@router.get("/unread/count", response_model=ApiResponse[UnreadCount], summary="Unread Message Count")
async def unread_count(user: CurrentUserDep, service: MessagingServiceDep):
    return ApiResponse.ok(UnreadCount(count=await service.get_total_unread(user.id)))
