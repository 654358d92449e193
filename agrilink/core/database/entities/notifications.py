"""
Notification and messaging entity models.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import DateTime, Field, Text

from agrilink.core.models.domain.enums import NotificationChannel, NotificationStatus, NotificationType

from ..base import Base, TimestampedBase, utc_now


class Notification(Base, table=True):
    """A notification addressed to one user on one channel.

    Table: notifications
    """

    __tablename__ = "notifications"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True)
    title: str = Field(max_length=255)
    message: str = Field(sa_type=Text)
    notification_type: NotificationType
    channel: NotificationChannel = Field(default=NotificationChannel.IN_APP)
    status: NotificationStatus = Field(default=NotificationStatus.PENDING)
    reference_id: Optional[str] = Field(default=None, max_length=64)
    reference_type: Optional[str] = Field(default=None, max_length=64)
    is_read: bool = Field(default=False, index=True)
    read_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    sent_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"Notification(id={self.id}, type={self.notification_type}, status={self.status})"


class NotificationPreference(TimestampedBase, table=True):
    """Per-user opt in/out flags for channels and notification types.

    Table: notification_preferences
    """

    __tablename__ = "notification_preferences"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(unique=True, index=True)
    email_enabled: bool = Field(default=True)
    sms_enabled: bool = Field(default=False)
    push_enabled: bool = Field(default=True)
    order_updates: bool = Field(default=True)
    listing_updates: bool = Field(default=True)
    iot_alerts: bool = Field(default=True)
    weather_alerts: bool = Field(default=True)
    marketing: bool = Field(default=False)

    def allows_channel(self, channel: NotificationChannel) -> bool:
        if channel == NotificationChannel.EMAIL:
            return self.email_enabled
        if channel == NotificationChannel.SMS:
            return self.sms_enabled
        if channel == NotificationChannel.PUSH:
            return self.push_enabled
        return True

    def allows_type(self, notification_type: NotificationType) -> bool:
        flags = {
            NotificationType.ORDER: self.order_updates,
            NotificationType.LISTING: self.listing_updates,
            NotificationType.IOT: self.iot_alerts,
            NotificationType.WEATHER: self.weather_alerts,
            NotificationType.MARKETING: self.marketing,
        }
        return flags.get(notification_type, True)


class Conversation(TimestampedBase, table=True):
    """A two-party message thread, optionally about a listing.

    Participants are stored normalised so ``participant1_id < participant2_id``.

    Table: conversations
    """

    __tablename__ = "conversations"
    __table_args__ = (
        UniqueConstraint("participant1_id", "participant2_id", "listing_id", name="uq_conversation_participants"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    participant1_id: uuid.UUID = Field(index=True)
    participant2_id: uuid.UUID = Field(index=True)
    listing_id: Optional[uuid.UUID] = Field(default=None)
    last_message_preview: Optional[str] = Field(default=None, max_length=128)
    last_message_at: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime)
    unread_count_participant1: int = Field(default=0)
    unread_count_participant2: int = Field(default=0)

    def has_participant(self, user_id: uuid.UUID) -> bool:
        return user_id in (self.participant1_id, self.participant2_id)

    def other_participant(self, user_id: uuid.UUID) -> uuid.UUID:
        return self.participant2_id if user_id == self.participant1_id else self.participant1_id

    def unread_count_for(self, user_id: uuid.UUID) -> int:
        if user_id == self.participant1_id:
            return self.unread_count_participant1
        return self.unread_count_participant2

    def increment_unread(self, user_id: uuid.UUID) -> None:
        if user_id == self.participant1_id:
            self.unread_count_participant1 += 1
        else:
            self.unread_count_participant2 += 1

    def reset_unread(self, user_id: uuid.UUID) -> None:
        if user_id == self.participant1_id:
            self.unread_count_participant1 = 0
        else:
            self.unread_count_participant2 = 0


class Message(Base, table=True):
    """Table: messages"""

    __tablename__ = "messages"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    conversation_id: uuid.UUID = Field(foreign_key="conversations.id", index=True)
    sender_id: uuid.UUID
    recipient_id: uuid.UUID = Field(index=True)
    content: str = Field(sa_type=Text)
    is_read: bool = Field(default=False)
    read_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
