"""
Unit tests for the marketplace and order endpoints.

Tests walk a listing from draft to a paid order:
- Listing creation, publication and public browsing
- Cart handling and checkout pricing
- Payment confirming the order and the seller shipping it
"""

import uuid

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

API = "/api/v1"


async def _published_listing(client: AsyncClient, headers, price: str = "100", quantity: str = "50") -> dict:
    response = await client.post(
        f"{API}/listings",
        json={
            "title": "Organic Tomatoes",
            "crop_type": "Tomato",
            "quantity": quantity,
            "quantity_unit": "KG",
            "price_per_unit": price,
        },
        headers=headers,
    )
    assert response.status_code == 201
    listing = response.json()["data"]
    assert listing["status"] == "DRAFT"

    response = await client.post(f"{API}/listings/{listing['id']}/publish", headers=headers)
    assert response.status_code == 200
    return response.json()["data"]


class TestListings:
    """Test listing endpoints."""

    async def test_only_farmers_create_listings(self, client: AsyncClient, auth_headers):
        response = await client.post(
            f"{API}/listings",
            json={"title": "Rice", "quantity": "10", "price_per_unit": "2"},
            headers=auth_headers(uuid.uuid4(), ["CUSTOMER"]),
        )

        assert response.status_code == 403

    async def test_published_listing_is_public(self, client: AsyncClient, auth_headers):
        listing = await _published_listing(client, auth_headers(uuid.uuid4(), ["FARMER"]))

        response = await client.get(f"{API}/listings")
        assert [item["id"] for item in response.json()["data"]["content"]] == [listing["id"]]

        response = await client.get(f"{API}/listings/{listing['id']}")
        assert response.json()["data"]["title"] == "Organic Tomatoes"

    async def test_other_farmer_cannot_delete(self, client: AsyncClient, auth_headers):
        listing = await _published_listing(client, auth_headers(uuid.uuid4(), ["FARMER"]))

        response = await client.delete(f"{API}/listings/{listing['id']}", headers=auth_headers(uuid.uuid4(), ["FARMER"]))

        assert response.status_code == 403

    async def test_unknown_listing(self, client: AsyncClient):
        response = await client.get(f"{API}/listings/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["message"].startswith("Listing not found with id")


class TestCheckoutFlow:
    """Test cart, checkout, payment and fulfilment over HTTP."""

    async def test_cart_to_shipped_order(self, client: AsyncClient, auth_headers):
        seller_id, buyer_id = uuid.uuid4(), uuid.uuid4()
        seller = auth_headers(seller_id, ["FARMER"])
        buyer = auth_headers(buyer_id, ["CUSTOMER"])
        listing = await _published_listing(client, seller)

        response = await client.post(f"{API}/cart/items", json={"listing_id": listing["id"], "quantity": "2"}, headers=buyer)
        assert response.status_code == 200
        assert response.json()["data"]["total_amount"] == 200.0

        response = await client.post(f"{API}/orders/checkout", json={"shipping_city": "Pune"}, headers=buyer)
        assert response.status_code == 201
        order = response.json()["data"]
        assert order["status"] == "PENDING"
        assert order["subtotal"] == 200.0
        assert order["total_amount"] == 250.0

        response = await client.get(f"{API}/cart/count", headers=buyer)
        assert response.json()["data"]["count"] == 0

        response = await client.post(
            f"{API}/payments", json={"order_id": order["id"], "amount": "250.00"}, headers=buyer
        )
        assert response.status_code == 201

        response = await client.get(f"{API}/orders/{order['id']}", headers=buyer)
        assert response.json()["data"]["status"] == "CONFIRMED"

        response = await client.post(f"{API}/orders/{order['id']}/ship", headers=seller)
        assert response.json()["data"]["status"] == "SHIPPED"

        response = await client.get(f"{API}/orders/{order['id']}/history", headers=buyer)
        assert [entry["status"] for entry in response.json()["data"]] == ["PENDING", "CONFIRMED", "SHIPPED"]

    async def test_checkout_with_empty_cart(self, client: AsyncClient, auth_headers):
        response = await client.post(f"{API}/orders/checkout", json={}, headers=auth_headers(uuid.uuid4()))

        assert response.status_code == 400
        assert response.json()["message"] == "Cart is empty"

    async def test_payment_amount_must_match(self, client: AsyncClient, auth_headers):
        seller = auth_headers(uuid.uuid4(), ["FARMER"])
        buyer = auth_headers(uuid.uuid4(), ["CUSTOMER"])
        listing = await _published_listing(client, seller)
        await client.post(f"{API}/cart/items", json={"listing_id": listing["id"], "quantity": "1"}, headers=buyer)
        order = (await client.post(f"{API}/orders/checkout", json={}, headers=buyer)).json()["data"]

        response = await client.post(f"{API}/payments", json={"order_id": order["id"], "amount": "1.00"}, headers=buyer)

        assert response.status_code == 400
