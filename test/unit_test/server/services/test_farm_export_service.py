"""Unit tests for the CSV farm export."""

import csv
import io
import uuid
from datetime import date, datetime
from decimal import Decimal

from agrilink.core.models.domain.enums import CropPlanStatus
from agrilink.core.models.io.farms import CropPlanCreate, FarmCreate, FieldCreate, HarvestRecord
from agrilink.server.services.farm_export import (
    CROP_PLAN_HEADER,
    FARM_HEADER,
    FIELD_HEADER,
    FarmExportService,
    amount,
    export_filename,
    to_csv,
)
from agrilink.server.services.farms import FarmService

TODAY = date(2026, 6, 15)


def _rows(content: str):
    return list(csv.reader(io.StringIO(content)))


async def _seed(session, farmer_id):
    service = FarmService(session)
    farm = await service.create_farm(
        farmer_id, FarmCreate(name="Valley Farm", location="Nashik, Maharashtra", total_area=Decimal("10"))
    )
    north = await service.create_field(
        farm.id, farmer_id, FieldCreate(name="North", area=Decimal("2.5"), soil_type="Loam", irrigation_type="Drip")
    )
    await service.create_field(farm.id, farmer_id, FieldCreate(name="South"))

    await service.create_crop_plan(
        north.id,
        farmer_id,
        CropPlanCreate(
            crop_name="Maize",
            crop_variety="Hybrid 4",
            status=CropPlanStatus.GROWING,
            planting_date=date(2026, 5, 1),
            expected_harvest_date=date(2026, 8, 1),
        ),
    )
    wheat = await service.create_crop_plan(
        north.id, farmer_id, CropPlanCreate(crop_name="Wheat", expected_yield=Decimal("1000"))
    )
    await service.record_harvest(
        wheat.id, farmer_id, HarvestRecord(actual_yield=Decimal("800"), actual_harvest_date=date(2026, 6, 10))
    )
    return farm


class TestHelpers:
    def test_amount(self):
        assert amount(Decimal("12.5")) == "12.50"
        assert amount(None) == "0.00"

    def test_export_filename(self):
        assert export_filename("crop_plans", date(2026, 6, 15)) == "crop_plans_2026-06-15.csv"

    def test_to_csv_quotes_commas(self):
        content = to_csv(["Name", "Location"], [["Valley Farm", "Nashik, Maharashtra"]])

        assert content == 'Name,Location\nValley Farm,"Nashik, Maharashtra"\n'


class TestFarmExportService:
    async def test_export_farms(self, session):
        farmer_id = uuid.uuid4()
        farm = await _seed(session, farmer_id)

        rows = _rows(await FarmExportService(session).export_farms(farmer_id))

        assert rows[0] == FARM_HEADER
        assert rows[1:] == [
            [
                "Valley Farm",
                "Nashik, Maharashtra",
                "10.00",
                "HECTARE",
                "2",
                "1",
                "ACTIVE",
                farm.created_at.date().isoformat(),
            ]
        ]

    async def test_export_fields_shows_current_crop(self, session):
        farmer_id = uuid.uuid4()
        await _seed(session, farmer_id)

        rows = _rows(await FarmExportService(session).export_fields(farmer_id))

        assert rows[0] == FIELD_HEADER
        assert sorted(rows[1:]) == [
            ["Valley Farm", "North", "2.50", "HECTARE", "Loam", "Drip", "Maize", "ACTIVE"],
            ["Valley Farm", "South", "0.00", "HECTARE", "-", "-", "-", "ACTIVE"],
        ]

    async def test_export_crop_plans(self, session):
        farmer_id = uuid.uuid4()
        await _seed(session, farmer_id)

        rows = _rows(await FarmExportService(session).export_crop_plans(farmer_id))

        assert rows[0] == CROP_PLAN_HEADER
        assert sorted(rows[1:]) == [
            ["Valley Farm", "North", "Maize", "Hybrid 4", "2026-05-01", "2026-08-01", "0.00", "0.00", "GROWING"],
            ["Valley Farm", "North", "Wheat", "-", "-", "-", "1000.00", "800.00", "HARVESTED"],
        ]

    async def test_export_analytics_summary(self, session):
        farmer_id = uuid.uuid4()
        await _seed(session, farmer_id)

        rows = _rows(
            await FarmExportService(session).export_analytics_summary(
                farmer_id, today=TODAY, now=datetime(2026, 6, 15, 8, 30, 12, 500)
            )
        )

        assert rows[:12] == [
            ["AgriLink Analytics Report"],
            ["Generated", "2026-06-15T08:30:12"],
            [],
            ["OVERVIEW"],
            ["Total Farms", "1"],
            ["Total Fields", "2"],
            ["Total Area Managed", "10.00"],
            ["Active Crops", "1"],
            [],
            ["YIELD STATISTICS"],
            ["Average Yield Efficiency", "80.0%"],
            [],
        ]
        assert rows[12:14] == [["TOP CROPS"], ["Crop", "Count"]]
        assert sorted(rows[14:]) == [["Maize", "1"], ["Wheat", "1"]]

    async def test_other_farmers_records_are_excluded(self, session):
        await _seed(session, uuid.uuid4())
        service = FarmExportService(session)
        farmer_id = uuid.uuid4()

        assert _rows(await service.export_farms(farmer_id)) == [FARM_HEADER]
        assert _rows(await service.export_fields(farmer_id)) == [FIELD_HEADER]
        assert _rows(await service.export_crop_plans(farmer_id)) == [CROP_PLAN_HEADER]
