"""
Notification and messaging I/O models.
"""

import uuid
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from agrilink.core.models.domain.enums import NotificationChannel, NotificationStatus, NotificationType


class NotificationCreate(BaseModel):
    """Internal request used by other services to notify a user."""

    user_id: uuid.UUID
    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    notification_type: NotificationType
    channel: NotificationChannel = NotificationChannel.IN_APP
    reference_id: Optional[str] = None
    reference_type: Optional[str] = None


class TemplateNotificationRequest(BaseModel):
    """Notification whose title and message contain ``#{key}`` placeholders."""

    user_id: uuid.UUID
    title_template: str = Field(min_length=1)
    message_template: str = Field(min_length=1)
    variables: Dict[str, str] = Field(default_factory=dict)
    notification_type: NotificationType
    channel: NotificationChannel = NotificationChannel.IN_APP
    reference_id: Optional[str] = None
    reference_type: Optional[str] = None


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    message: str
    notification_type: NotificationType
    channel: NotificationChannel
    status: NotificationStatus
    reference_id: Optional[str] = None
    reference_type: Optional[str] = None
    is_read: bool
    read_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    created_at: datetime


class PreferenceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: uuid.UUID
    email_enabled: bool = True
    sms_enabled: bool = False
    push_enabled: bool = True
    order_updates: bool = True
    listing_updates: bool = True
    iot_alerts: bool = True
    weather_alerts: bool = True
    marketing: bool = False


class PreferenceUpdate(BaseModel):
    email_enabled: Optional[bool] = None
    sms_enabled: Optional[bool] = None
    push_enabled: Optional[bool] = None
    order_updates: Optional[bool] = None
    listing_updates: Optional[bool] = None
    iot_alerts: Optional[bool] = None
    weather_alerts: Optional[bool] = None
    marketing: Optional[bool] = None


class MessageCreate(BaseModel):
    recipient_id: uuid.UUID
    content: str = Field(min_length=1, max_length=5000)
    listing_id: Optional[uuid.UUID] = None


class MessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    conversation_id: uuid.UUID
    sender_id: uuid.UUID
    recipient_id: uuid.UUID
    content: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class ConversationRead(BaseModel):
    """A conversation seen from one participant's side."""

    id: uuid.UUID
    other_participant_id: uuid.UUID
    listing_id: Optional[uuid.UUID] = None
    last_message_preview: Optional[str] = None
    last_message_at: Optional[datetime] = None
    unread_count: int = 0
    created_at: datetime


class UnreadCount(BaseModel):
    count: int
