"""Unit tests for buyer/farmer messaging."""

import uuid

import pytest

from agrilink.core.exceptions import BadRequestException, ResourceNotFoundException
from agrilink.core.models.io.notifications import MessageCreate
from agrilink.server.services.messaging import MessagingService, message_preview, normalise_pair


class TestHelpers:
    def test_normalise_pair_is_order_independent(self):
        a, b = uuid.uuid4(), uuid.uuid4()
        assert normalise_pair(a, b) == normalise_pair(b, a)

    def test_message_preview_truncates(self):
        assert message_preview("short") == "short"
        preview = message_preview("x" * 150)
        assert len(preview) == 103
        assert preview.endswith("...")


class TestSendMessage:
    async def test_customer_to_farmer_creates_conversation(self, session, make_user):
        customer = await make_user(roles="CUSTOMER")
        farmer = await make_user(roles="FARMER")
        service = MessagingService(session)

        message = await service.send_message(
            customer.id, "CUSTOMER", MessageCreate(recipient_id=farmer.id, content="Are the tomatoes organic?")
        )

        conversations = await service.get_conversations(farmer.id)
        assert len(conversations) == 1
        assert conversations[0].other_participant_id == customer.id
        assert conversations[0].unread_count == 1
        assert conversations[0].last_message_preview == "Are the tomatoes organic?"
        assert message.recipient_id == farmer.id

    async def test_replies_reuse_the_conversation(self, session, make_user):
        customer = await make_user(roles="CUSTOMER")
        farmer = await make_user(roles="FARMER")
        service = MessagingService(session)

        first = await service.send_message(customer.id, "CUSTOMER", MessageCreate(recipient_id=farmer.id, content="Hi"))
        reply = await service.send_message(farmer.id, "FARMER", MessageCreate(recipient_id=customer.id, content="Yes"))

        assert first.conversation_id == reply.conversation_id
        assert await service.get_total_unread(customer.id) == 1
        assert await service.get_total_unread(farmer.id) == 1

    async def test_customer_cannot_message_customer(self, session, make_user):
        sender = await make_user(roles="CUSTOMER")
        recipient = await make_user(roles="CUSTOMER")

        with pytest.raises(BadRequestException, match="cannot send messages"):
            await MessagingService(session).send_message(
                sender.id, "CUSTOMER", MessageCreate(recipient_id=recipient.id, content="Hello")
            )

    async def test_cannot_message_yourself(self, session, make_user):
        farmer = await make_user(roles="FARMER")

        with pytest.raises(BadRequestException, match="yourself"):
            await MessagingService(session).send_message(
                farmer.id, "FARMER", MessageCreate(recipient_id=farmer.id, content="Note")
            )

    async def test_unknown_recipient(self, session, make_user):
        farmer = await make_user(roles="FARMER")

        with pytest.raises(ResourceNotFoundException):
            await MessagingService(session).send_message(
                farmer.id, "FARMER", MessageCreate(recipient_id=uuid.uuid4(), content="Hello")
            )


class TestConversationAccess:
    async def test_mark_read_and_list_messages(self, session, make_user):
        customer = await make_user(roles="CUSTOMER")
        farmer = await make_user(roles="FARMER")
        service = MessagingService(session)
        message = await service.send_message(
            customer.id, "CUSTOMER", MessageCreate(recipient_id=farmer.id, content="Price for 10 kg?")
        )

        read = await service.mark_conversation_read(message.conversation_id, farmer.id)
        page = await service.get_messages(message.conversation_id, farmer.id, 0, 20)

        assert read.unread_count == 0
        assert await service.get_total_unread(farmer.id) == 0
        assert page.total_elements == 1
        assert page.content[0].content == "Price for 10 kg?"

    async def test_outsider_is_rejected(self, session, make_user):
        customer = await make_user(roles="CUSTOMER")
        farmer = await make_user(roles="FARMER")
        service = MessagingService(session)
        message = await service.send_message(customer.id, "CUSTOMER", MessageCreate(recipient_id=farmer.id, content="Hi"))

        with pytest.raises(BadRequestException, match="not a participant"):
            await service.get_conversation(message.conversation_id, uuid.uuid4())

    async def test_missing_conversation(self, session):
        with pytest.raises(ResourceNotFoundException):
            await MessagingService(session).get_messages(uuid.uuid4(), uuid.uuid4(), 0, 20)
