"""Unit tests for farm management and farm analytics."""

import uuid
from datetime import date, timedelta
from decimal import Decimal

import pytest

from agrilink.core.exceptions import ForbiddenException, ResourceNotFoundException
from agrilink.core.models.domain.enums import CropPlanStatus
from agrilink.core.models.io.farms import (
    CropPlanCreate,
    FarmCreate,
    FarmOnboardingRequest,
    FarmUpdate,
    FieldCreate,
    HarvestRecord,
)
from agrilink.server.services.farm_analytics import FarmAnalyticsService, monthly_activity, percentage
from agrilink.server.services.farms import FarmService, onboarding_location


class TestHelpers:
    def test_onboarding_location(self):
        assert onboarding_location("Nashik", "Maharashtra") == "Nashik, Maharashtra"
        assert onboarding_location(" Nashik ", None) == "Nashik"
        assert onboarding_location(None, "  ") is None

    def test_percentage(self):
        assert percentage(Decimal("1"), Decimal("3")) == 33.33
        assert percentage(Decimal("5"), Decimal("0")) == 0.0

    def test_monthly_activity_covers_twelve_months(self):
        months = monthly_activity([], date(2026, 3, 15))

        assert len(months) == 12
        assert months[0].month == "Apr 2025"
        assert months[-1].month == "Mar 2026"


class TestFarmService:
    async def test_farm_field_and_plan_lifecycle(self, session):
        farmer_id = uuid.uuid4()
        service = FarmService(session)

        farm = await service.create_farm(farmer_id, FarmCreate(name="Green Acres", total_area=Decimal("12.5")))
        field = await service.create_field(farm.id, farmer_id, FieldCreate(name="North Plot"))
        plan = await service.create_crop_plan(field.id, farmer_id, CropPlanCreate(crop_name="Wheat"))
        assert plan.status == CropPlanStatus.PLANNED

        harvested = await service.record_harvest(
            plan.id, farmer_id, HarvestRecord(actual_yield=Decimal("900"), actual_harvest_date=date(2026, 4, 2))
        )

        assert harvested.status == CropPlanStatus.HARVESTED
        assert harvested.actual_harvest_date == date(2026, 4, 2)
        assert [p.id for p in await service.get_crop_plans_by_field(field.id)] == [plan.id]

    async def test_other_farmer_is_forbidden(self, session):
        service = FarmService(session)
        farm = await service.create_farm(uuid.uuid4(), FarmCreate(name="Private Farm"))

        with pytest.raises(ForbiddenException):
            await service.update_farm(farm.id, uuid.uuid4(), FarmUpdate(name="Mine now"))

    async def test_delete_farm_is_soft(self, session):
        farmer_id = uuid.uuid4()
        service = FarmService(session)
        farm = await service.create_farm(farmer_id, FarmCreate(name="Old Farm"))

        await service.delete_farm(farm.id, farmer_id)

        with pytest.raises(ResourceNotFoundException):
            await service.get_farm(farm.id)
        assert await service.get_farms_by_farmer(farmer_id) == []

    async def test_onboarding_is_repeatable(self, session):
        farmer_id = uuid.uuid4()
        service = FarmService(session)

        first = await service.onboard_farm(farmer_id, FarmOnboardingRequest(farm_name="Sunrise", city="Pune"))
        second = await service.onboard_farm(farmer_id, FarmOnboardingRequest(farm_name="Sunrise Farms"))

        assert first.id == second.id
        assert second.name == "Sunrise Farms"
        assert second.location == "Pune"


class TestFarmAnalyticsService:
    async def _seed(self, session, farmer_id, today):
        service = FarmService(session)
        farm = await service.create_farm(farmer_id, FarmCreate(name="Valley Farm", total_area=Decimal("10")))
        north = await service.create_field(farm.id, farmer_id, FieldCreate(name="North"))
        await service.create_field(farm.id, farmer_id, FieldCreate(name="South"))

        growing = await service.create_crop_plan(
            north.id,
            farmer_id,
            CropPlanCreate(
                crop_name="Maize",
                status=CropPlanStatus.GROWING,
                planting_date=today - timedelta(days=40),
                expected_harvest_date=today + timedelta(days=10),
            ),
        )
        harvested = await service.create_crop_plan(
            north.id,
            farmer_id,
            CropPlanCreate(crop_name="Maize", expected_yield=Decimal("1000"), planting_date=today - timedelta(days=120)),
        )
        await service.record_harvest(
            harvested.id, farmer_id, HarvestRecord(actual_yield=Decimal("800"), actual_harvest_date=today - timedelta(days=5))
        )
        return farm, growing

    async def test_farm_analytics(self, session):
        farmer_id = uuid.uuid4()
        today = date(2026, 6, 15)
        farm, _ = await self._seed(session, farmer_id, today)

        analytics = await FarmAnalyticsService(session).get_farm_analytics(farm.id, farmer_id, today=today)

        assert analytics.total_fields == 2
        assert analytics.total_crop_plans == 2
        assert analytics.active_crop_plans == 1
        assert analytics.completed_harvests == 1
        assert analytics.crop_distribution == {"Maize": 2}
        assert analytics.yield_stats.efficiency == 80.0
        assert analytics.utilization_percent == 50.0
        statuses = {summary.field_name: summary.status for summary in analytics.field_summaries}
        assert statuses == {"North": "GROWING", "South": "IDLE"}

    async def test_dashboard_summary(self, session):
        farmer_id = uuid.uuid4()
        today = date(2026, 6, 15)
        await self._seed(session, farmer_id, today)

        summary = await FarmAnalyticsService(session).get_dashboard_summary(farmer_id, today=today)

        assert summary.total_farms == 1
        assert summary.total_fields == 2
        assert summary.total_area == 10.0
        assert summary.active_crops == 1
        assert len(summary.upcoming_activities) == 1
        upcoming = summary.upcoming_activities[0]
        assert upcoming.activity_type == "HARVESTING"
        assert upcoming.days_until == 10
        assert upcoming.farm_name == "Valley Farm"
        assert summary.recent_harvests[0].actual_yield == 800.0
        assert summary.average_yield_efficiency == 80.0

    async def test_analytics_for_foreign_farm(self, session):
        farm = await FarmService(session).create_farm(uuid.uuid4(), FarmCreate(name="Not yours"))

        with pytest.raises(ForbiddenException):
            await FarmAnalyticsService(session).get_farm_analytics(farm.id, uuid.uuid4())
