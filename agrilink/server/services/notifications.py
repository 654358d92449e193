"""
Notification service.

A notification is stored only when the user's preferences allow both its
channel and its type. Delivery to external channels is not wired to any
provider; it is logged and the notification is marked SENT.
"""

import uuid
from typing import Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database import utc_now
from agrilink.core.database.entities import Notification, NotificationPreference
from agrilink.core.database.repositories import NotificationPreferenceRepository, NotificationRepository, Page
from agrilink.core.exceptions import ResourceNotFoundException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import NotificationStatus
from agrilink.core.models.io.notifications import NotificationCreate, PreferenceUpdate, TemplateNotificationRequest

logger = get_logger(__name__)


def render_template(template: str, variables: Dict[str, str]) -> str:
    """Substitute ``#{key}`` placeholders; unknown placeholders are left as is."""
    rendered = template
    for key, value in variables.items():
        rendered = rendered.replace(f"#{{{key}}}", str(value))
    return rendered


Dispatcher = Callable[[Notification], None]


def log_delivery(notification: Notification) -> None:
    """Default dispatcher: no provider is wired, so delivery is a log line."""
    logger.info(
        f"Delivering {notification.channel.value} notification {notification.id} "
        f"to user {notification.user_id}: {notification.title}",
        extra={"notification_id": str(notification.id), "channel": notification.channel.value},
    )


class NotificationService:
    def __init__(self, session: AsyncSession, dispatcher: Optional[Dispatcher] = None) -> None:
        self.session = session
        self.dispatcher = dispatcher or log_delivery
        self.notifications = NotificationRepository(session)
        self.preferences = NotificationPreferenceRepository(session)

    async def send_notification(self, request: NotificationCreate) -> Optional[Notification]:
        """Store and deliver a notification.

        Returns:
            The notification, or None when the user's preferences suppress it.
        """
        preferences = await self._preferences_or_default(request.user_id)
        if not preferences.allows_channel(request.channel) or not preferences.allows_type(request.notification_type):
            logger.info(
                f"Notification suppressed for user {request.user_id} by preferences",
                extra={
                    "user_id": str(request.user_id),
                    "channel": request.channel.value,
                    "notification_type": request.notification_type.value,
                },
            )
            return None

        notification = await self.notifications.create(
            Notification(**request.model_dump(), status=NotificationStatus.PENDING)
        )
        self._deliver(notification)
        await self.notifications.update(notification)
        await self.session.commit()
        return notification

    async def send_from_template(self, request: TemplateNotificationRequest) -> Optional[Notification]:
        return await self.send_notification(
            NotificationCreate(
                user_id=request.user_id,
                title=render_template(request.title_template, request.variables),
                message=render_template(request.message_template, request.variables),
                notification_type=request.notification_type,
                channel=request.channel,
                reference_id=request.reference_id,
                reference_type=request.reference_type,
            )
        )

    def _deliver(self, notification: Notification) -> None:
        try:
            self.dispatcher(notification)
        except Exception as e:
            logger.error(f"Failed to deliver notification {notification.id}: {e}", exc_info=True)
            notification.status = NotificationStatus.FAILED
            return
        notification.status = NotificationStatus.SENT
        notification.sent_at = utc_now()

    async def get_notifications(self, user_id: uuid.UUID, page: int, size: int) -> Page[Notification]:
        return await self.notifications.find_by_user(user_id, page, size)

    async def get_unread_notifications(self, user_id: uuid.UUID) -> List[Notification]:
        return await self.notifications.find_unread_by_user(user_id)

    async def get_unread_count(self, user_id: uuid.UUID) -> int:
        return await self.notifications.count_unread_by_user(user_id)

    async def mark_as_read(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> Notification:
        notification = await self.notifications.get_by_id(notification_id)
        if notification is None or notification.user_id != user_id:
            raise ResourceNotFoundException("Notification", "id", notification_id)
        self._mark_read(notification)
        await self.notifications.update(notification)
        await self.session.commit()
        return notification

    async def mark_all_as_read(self, user_id: uuid.UUID) -> int:
        unread = await self.notifications.find_unread_by_user(user_id)
        for notification in unread:
            self._mark_read(notification)
        await self.session.flush()
        await self.session.commit()
        return len(unread)

    @staticmethod
    def _mark_read(notification: Notification) -> None:
        notification.is_read = True
        notification.read_at = utc_now()
        notification.status = NotificationStatus.READ

    async def _preferences_or_default(self, user_id: uuid.UUID) -> NotificationPreference:
        preferences = await self.preferences.get_by_user(user_id)
        return preferences if preferences is not None else NotificationPreference(user_id=user_id)

    async def get_preferences(self, user_id: uuid.UUID) -> NotificationPreference:
        return await self._preferences_or_default(user_id)

    async def update_preferences(self, user_id: uuid.UUID, request: PreferenceUpdate) -> NotificationPreference:
        preferences = await self.preferences.get_by_user(user_id)
        if preferences is None:
            preferences = await self.preferences.create(NotificationPreference(user_id=user_id))
        for key, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(preferences, key, value)
        await self.preferences.update(preferences)
        await self.session.commit()
        return preferences
