"""
Unit tests for the CSV export endpoints.

Tests cover:
- CSV content type and attachment filenames per report
- Rows limited to the caller's farms
- Role checks
"""

import uuid
from datetime import date

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

API = "/api/v1"


async def _farm_with_field(client: AsyncClient, headers) -> dict:
    response = await client.post(
        f"{API}/farms", json={"name": "Green Acres", "location": "Pune", "total_area": "4"}, headers=headers
    )
    assert response.status_code == 201
    farm = response.json()["data"]

    response = await client.post(
        f"{API}/farms/{farm['id']}/fields", json={"name": "East Plot", "area": "1.5"}, headers=headers
    )
    assert response.status_code == 201
    return farm


class TestFarmExport:
    @pytest.mark.parametrize(
        "path, prefix",
        [("farms", "farms"), ("fields", "fields"), ("crops", "crop_plans"), ("analytics", "analytics_report")],
    )
    async def test_reports_are_csv_attachments(self, client: AsyncClient, auth_headers, path, prefix):
        response = await client.get(f"{API}/export/{path}", headers=auth_headers(uuid.uuid4(), ["FARMER"]))

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.headers["content-disposition"] == (
            f"attachment; filename={prefix}_{date.today().isoformat()}.csv"
        )

    async def test_farm_rows(self, client: AsyncClient, auth_headers):
        headers = auth_headers(uuid.uuid4(), ["FARMER"])
        await _farm_with_field(client, headers)
        await _farm_with_field(client, auth_headers(uuid.uuid4(), ["FARMER"]))

        response = await client.get(f"{API}/export/farms", headers=headers)

        lines = response.text.splitlines()
        assert lines[0] == "Farm Name,Location,Total Area,Area Unit,Total Fields,Active Crops,Status,Created At"
        assert len(lines) == 2
        assert lines[1].startswith("Green Acres,Pune,4.00,HECTARE,1,0,ACTIVE,")

    async def test_field_rows(self, client: AsyncClient, auth_headers):
        headers = auth_headers(uuid.uuid4(), ["FARMER"])
        await _farm_with_field(client, headers)

        response = await client.get(f"{API}/export/fields", headers=headers)

        assert response.text.splitlines()[1:] == ["Green Acres,East Plot,1.50,HECTARE,-,-,-,ACTIVE"]

    async def test_customer_cannot_export(self, client: AsyncClient, auth_headers):
        response = await client.get(f"{API}/export/farms", headers=auth_headers(uuid.uuid4(), ["CUSTOMER"]))

        assert response.status_code == 403
        assert response.json()["error"] == "FORBIDDEN"
