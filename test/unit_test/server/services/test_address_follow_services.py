"""Unit tests for the address book and farmer follows."""

import uuid

import pytest

from agrilink.core.exceptions import BadRequestException, ResourceNotFoundException
from agrilink.core.models.io.users import AddressCreate, AddressUpdate
from agrilink.server.services.addresses import AddressService
from agrilink.server.services.follows import FollowService


def _address(label: str, is_default: bool = False) -> AddressCreate:
    return AddressCreate(
        label=label,
        full_name="Meera Patil",
        address_line1="12 Market Road",
        city="Nashik",
        is_default=is_default,
    )


class TestAddresses:
    async def test_first_address_becomes_default(self, session):
        address = await AddressService(session).create_address(uuid.uuid4(), _address("Home"))

        assert address.is_default is True
        assert address.country == "India"

    async def test_new_default_replaces_old(self, session):
        user_id = uuid.uuid4()
        service = AddressService(session)
        home = await service.create_address(user_id, _address("Home"))
        office = await service.create_address(user_id, _address("Office", is_default=True))

        addresses = await service.get_addresses(user_id)

        assert [a.id for a in addresses if a.is_default] == [office.id]
        assert home.id in [a.id for a in addresses]

    async def test_deleting_default_promotes_another(self, session):
        user_id = uuid.uuid4()
        service = AddressService(session)
        home = await service.create_address(user_id, _address("Home"))
        office = await service.create_address(user_id, _address("Office"))

        await service.delete_address(home.id, user_id)

        remaining = await service.get_addresses(user_id)
        assert [a.id for a in remaining] == [office.id]
        assert remaining[0].is_default is True

    async def test_set_default_and_update(self, session):
        user_id = uuid.uuid4()
        service = AddressService(session)
        home = await service.create_address(user_id, _address("Home"))
        farm = await service.create_address(user_id, _address("Farm"))

        await service.set_default_address(farm.id, user_id)
        updated = await service.update_address(home.id, user_id, AddressUpdate(city="Pune"))

        assert updated.city == "Pune"
        assert updated.is_default is False
        assert (await service.get_address(farm.id, user_id)).is_default is True

    async def test_other_users_address_is_not_found(self, session):
        service = AddressService(session)
        address = await service.create_address(uuid.uuid4(), _address("Home"))

        with pytest.raises(ResourceNotFoundException):
            await service.get_address(address.id, uuid.uuid4())


class TestFollows:
    async def test_follow_and_unfollow(self, session):
        customer, farmer = uuid.uuid4(), uuid.uuid4()
        service = FollowService(session)

        await service.follow_farmer(customer, farmer)

        assert await service.is_following(customer, farmer) is True
        assert await service.get_follower_count(farmer) == 1
        assert [f.farmer_id for f in await service.get_followed_farmers(customer)] == [farmer]
        assert [f.customer_id for f in await service.get_followers(farmer)] == [customer]

        await service.unfollow_farmer(customer, farmer)

        assert await service.is_following(customer, farmer) is False
        assert await service.get_follower_count(farmer) == 0

    async def test_cannot_follow_yourself(self, session):
        user_id = uuid.uuid4()
        with pytest.raises(BadRequestException, match="cannot follow yourself"):
            await FollowService(session).follow_farmer(user_id, user_id)

    async def test_cannot_follow_twice(self, session):
        customer, farmer = uuid.uuid4(), uuid.uuid4()
        service = FollowService(session)
        await service.follow_farmer(customer, farmer)

        with pytest.raises(BadRequestException, match="Already following"):
            await service.follow_farmer(customer, farmer)

    async def test_unfollow_without_follow(self, session):
        with pytest.raises(ResourceNotFoundException):
            await FollowService(session).unfollow_farmer(uuid.uuid4(), uuid.uuid4())
