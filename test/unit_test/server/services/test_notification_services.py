"""Unit tests for notifications and preferences."""

import uuid

import pytest

from agrilink.core.exceptions import ResourceNotFoundException
from agrilink.core.models.domain.enums import NotificationChannel, NotificationStatus, NotificationType
from agrilink.core.models.io.notifications import NotificationCreate, PreferenceUpdate, TemplateNotificationRequest
from agrilink.server.services.notifications import NotificationService, render_template


def _order_update(user_id: uuid.UUID, channel: NotificationChannel = NotificationChannel.IN_APP) -> NotificationCreate:
    return NotificationCreate(
        user_id=user_id,
        title="Order shipped",
        message="Your order is on its way",
        notification_type=NotificationType.ORDER,
        channel=channel,
        reference_id="ORD-1",
        reference_type="ORDER",
    )


class TestRenderTemplate:
    def test_replaces_known_placeholders(self):
        assert render_template("Hi #{name}, order #{order}", {"name": "Asha", "order": "42"}) == "Hi Asha, order 42"

    def test_unknown_placeholders_are_kept(self):
        assert render_template("Hello #{name}", {}) == "Hello #{name}"


class TestSendNotification:
    async def test_in_app_notification_is_sent(self, session):
        user_id = uuid.uuid4()
        notification = await NotificationService(session).send_notification(_order_update(user_id))

        assert notification is not None
        assert notification.status == NotificationStatus.SENT
        assert notification.sent_at is not None
        assert notification.is_read is False

    async def test_dispatcher_receives_notification(self, session):
        delivered = []
        service = NotificationService(session, dispatcher=delivered.append)

        notification = await service.send_notification(_order_update(uuid.uuid4()))

        assert delivered == [notification]
        assert notification.status == NotificationStatus.SENT

    async def test_delivery_error_marks_failed(self, session):
        def broken_channel(notification):
            raise ConnectionError("gateway unreachable")

        user_id = uuid.uuid4()
        service = NotificationService(session, dispatcher=broken_channel)

        notification = await service.send_notification(_order_update(user_id))

        assert notification.status == NotificationStatus.FAILED
        assert notification.sent_at is None
        stored = await service.get_notifications(user_id, 0, 10)
        assert [n.status for n in stored.content] == [NotificationStatus.FAILED]

    async def test_sms_is_suppressed_by_default_preferences(self, session):
        result = await NotificationService(session).send_notification(
            _order_update(uuid.uuid4(), NotificationChannel.SMS)
        )

        assert result is None

    async def test_type_opt_out_suppresses(self, session):
        user_id = uuid.uuid4()
        service = NotificationService(session)
        await service.update_preferences(user_id, PreferenceUpdate(order_updates=False))

        assert await service.send_notification(_order_update(user_id)) is None
        assert await service.get_unread_count(user_id) == 0

    async def test_send_from_template(self, session):
        user_id = uuid.uuid4()
        notification = await NotificationService(session).send_from_template(
            TemplateNotificationRequest(
                user_id=user_id,
                title_template="Alert on #{device}",
                message_template="#{metric} crossed #{threshold}",
                variables={"device": "Sensor 1", "metric": "TEMPERATURE", "threshold": "35"},
                notification_type=NotificationType.IOT,
            )
        )

        assert notification.title == "Alert on Sensor 1"
        assert notification.message == "TEMPERATURE crossed 35"


class TestReadState:
    async def test_mark_as_read(self, session):
        user_id = uuid.uuid4()
        service = NotificationService(session)
        notification = await service.send_notification(_order_update(user_id))

        updated = await service.mark_as_read(notification.id, user_id)

        assert updated.is_read is True
        assert updated.status == NotificationStatus.READ
        assert updated.read_at is not None
        assert await service.get_unread_count(user_id) == 0

    async def test_mark_as_read_of_another_user_is_not_found(self, session):
        service = NotificationService(session)
        notification = await service.send_notification(_order_update(uuid.uuid4()))

        with pytest.raises(ResourceNotFoundException):
            await service.mark_as_read(notification.id, uuid.uuid4())

    async def test_mark_all_as_read(self, session):
        user_id = uuid.uuid4()
        service = NotificationService(session)
        for _ in range(3):
            await service.send_notification(_order_update(user_id))

        assert len(await service.get_unread_notifications(user_id)) == 3
        assert await service.mark_all_as_read(user_id) == 3
        assert await service.get_unread_count(user_id) == 0

        page = await service.get_notifications(user_id, 0, 2)
        assert page.total_elements == 3
        assert len(page.content) == 2


class TestPreferences:
    async def test_defaults_without_stored_row(self, session):
        preferences = await NotificationService(session).get_preferences(uuid.uuid4())

        assert preferences.email_enabled is True
        assert preferences.sms_enabled is False
        assert preferences.marketing is False

    async def test_partial_update_keeps_other_flags(self, session):
        user_id = uuid.uuid4()
        service = NotificationService(session)

        await service.update_preferences(user_id, PreferenceUpdate(sms_enabled=True))
        preferences = await service.update_preferences(user_id, PreferenceUpdate(marketing=True))

        assert preferences.sms_enabled is True
        assert preferences.marketing is True
        assert preferences.push_enabled is True
