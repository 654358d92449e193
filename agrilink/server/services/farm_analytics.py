"""
Farm analytics: per-farm statistics and the farmer's dashboard summary.
"""

import uuid
from collections import Counter
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database.entities import CropPlan, FarmField
from agrilink.core.database.repositories import CropPlanRepository, FarmRepository, FieldRepository
from agrilink.core.models.domain.enums import CropPlanStatus
from agrilink.core.models.io.farms import (
    DashboardSummary,
    FarmAnalytics,
    FieldSummary,
    MonthlyActivity,
    RecentHarvest,
    UpcomingActivity,
    YieldStats,
)

from .farms import FarmService

TWO_PLACES = Decimal("0.01")
HUNDRED = Decimal("100")

MONTHS_OF_ACTIVITY = 12
TOP_CROPS_IN_DISTRIBUTION = 10
TOP_CROPS_ON_DASHBOARD = 5
UPCOMING_WINDOW_DAYS = 30
MAX_UPCOMING_ACTIVITIES = 10
MAX_RECENT_HARVESTS = 5


def _round2(value: Decimal) -> float:
    return float(value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def percentage(part: Decimal, whole: Decimal) -> float:
    """``part / whole * 100`` rounded to 2 places; 0 when ``whole`` is zero."""
    if not whole:
        return 0.0
    return _round2(Decimal(part) / Decimal(whole) * HUNDRED)


def top_counts(names: Iterable[str], limit: int) -> Dict[str, int]:
    return dict(Counter(names).most_common(limit))


def yield_stats(plans: List[CropPlan]) -> YieldStats:
    harvested = [plan for plan in plans if plan.status == CropPlanStatus.HARVESTED]
    expected = sum((Decimal(plan.expected_yield or 0) for plan in harvested), Decimal("0"))
    actual = sum((Decimal(plan.actual_yield or 0) for plan in harvested), Decimal("0"))
    return YieldStats(
        total_expected=_round2(expected),
        total_actual=_round2(actual),
        efficiency=percentage(actual, expected),
    )


def _shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def monthly_activity(plans: List[CropPlan], today: date) -> List[MonthlyActivity]:
    """Planted/harvested counts for the last 12 months, oldest first."""
    months: Dict[Tuple[int, int], MonthlyActivity] = {}
    for offset in range(-(MONTHS_OF_ACTIVITY - 1), 1):
        year, month = _shift_month(today.year, today.month, offset)
        months[(year, month)] = MonthlyActivity(month=date(year, month, 1).strftime("%b %Y"))

    for plan in plans:
        if plan.planting_date and (plan.planting_date.year, plan.planting_date.month) in months:
            months[(plan.planting_date.year, plan.planting_date.month)].planted += 1
        if plan.actual_harvest_date:
            key = (plan.actual_harvest_date.year, plan.actual_harvest_date.month)
            if key in months:
                months[key].harvested += 1
    return list(months.values())


def _current_plan(plans: List[CropPlan]) -> Optional[CropPlan]:
    return next((plan for plan in plans if plan.is_active), None)


class FarmAnalyticsService:
    def __init__(self, session: AsyncSession) -> None:
        self.farm_service = FarmService(session)
        self.farms = FarmRepository(session)
        self.fields = FieldRepository(session)
        self.crop_plans = CropPlanRepository(session)

    async def get_farm_analytics(
        self, farm_id: uuid.UUID, farmer_id: uuid.UUID, today: Optional[date] = None
    ) -> FarmAnalytics:
        today = today or date.today()
        farm = await self.farm_service.get_farm_for_owner(farm_id, farmer_id)
        fields = await self.fields.find_active_by_farm(farm.id)
        plans = await self.crop_plans.find_by_fields([field.id for field in fields])
        plans_by_field = self._group_by_field(plans)

        summaries = [self._field_summary(field, plans_by_field.get(field.id, [])) for field in fields]
        utilised = sum(1 for summary in summaries if summary.status != "IDLE")

        return FarmAnalytics(
            farm_id=farm.id,
            farm_name=farm.name,
            total_fields=len(fields),
            total_crop_plans=len(plans),
            active_crop_plans=sum(1 for plan in plans if plan.is_active),
            completed_harvests=sum(1 for plan in plans if plan.status == CropPlanStatus.HARVESTED),
            crop_distribution=top_counts((plan.crop_name for plan in plans), TOP_CROPS_IN_DISTRIBUTION),
            yield_stats=yield_stats(plans),
            monthly_activity=monthly_activity(plans, today),
            field_summaries=summaries,
            utilization_percent=percentage(Decimal(utilised), Decimal(len(fields))),
        )

    async def get_dashboard_summary(self, farmer_id: uuid.UUID, today: Optional[date] = None) -> DashboardSummary:
        today = today or date.today()
        farms = await self.farms.find_active_by_farmer(farmer_id)
        farm_names = {farm.id: farm.name for farm in farms}
        fields = await self.fields.find_active_by_farms(list(farm_names))
        fields_by_id = {field.id: field for field in fields}
        plans = await self.crop_plans.find_by_fields(list(fields_by_id))

        total_area = sum((Decimal(farm.total_area or 0) for farm in farms), Decimal("0"))
        active_plans = [plan for plan in plans if plan.is_active]

        upcoming: List[UpcomingActivity] = []
        horizon = today + timedelta(days=UPCOMING_WINDOW_DAYS)
        for plan in plans:
            if plan.status == CropPlanStatus.PLANNED:
                activity, when = "PLANTING", plan.planting_date
            elif plan.is_active:
                activity, when = "HARVESTING", plan.expected_harvest_date
            else:
                continue
            if when is None or not today <= when <= horizon:
                continue
            field = fields_by_id[plan.field_id]
            upcoming.append(
                UpcomingActivity(
                    activity_type=activity,
                    crop_name=plan.crop_name,
                    field_name=field.name,
                    farm_name=farm_names.get(field.farm_id, ""),
                    scheduled_date=when,
                    days_until=(when - today).days,
                )
            )
        upcoming.sort(key=lambda item: item.days_until)

        harvested = sorted(
            (plan for plan in plans if plan.status == CropPlanStatus.HARVESTED),
            key=lambda plan: plan.actual_harvest_date or date.min,
            reverse=True,
        )
        recent = [
            RecentHarvest(
                crop_name=plan.crop_name,
                field_name=fields_by_id[plan.field_id].name,
                harvest_date=plan.actual_harvest_date,
                actual_yield=float(plan.actual_yield) if plan.actual_yield is not None else None,
                expected_yield=float(plan.expected_yield) if plan.expected_yield is not None else None,
                yield_unit=plan.yield_unit,
            )
            for plan in harvested[:MAX_RECENT_HARVESTS]
        ]

        return DashboardSummary(
            total_farms=len(farms),
            total_fields=len(fields),
            total_area=_round2(total_area),
            active_crops=len(active_plans),
            top_crops=top_counts((plan.crop_name for plan in plans), TOP_CROPS_ON_DASHBOARD),
            upcoming_activities=upcoming[:MAX_UPCOMING_ACTIVITIES],
            recent_harvests=recent,
            average_yield_efficiency=yield_stats(plans).efficiency,
        )

    @staticmethod
    def _group_by_field(plans: List[CropPlan]) -> Dict[uuid.UUID, List[CropPlan]]:
        grouped: Dict[uuid.UUID, List[CropPlan]] = {}
        for plan in plans:
            grouped.setdefault(plan.field_id, []).append(plan)
        return grouped

    @staticmethod
    def _field_summary(field: FarmField, plans: List[CropPlan]) -> FieldSummary:
        current = _current_plan(plans)
        return FieldSummary(
            field_id=field.id,
            field_name=field.name,
            area=float(field.area) if field.area is not None else None,
            area_unit=field.area_unit,
            current_crop=current.crop_name if current else "None",
            status=current.status.value if current else "IDLE",
            crop_plan_count=len(plans),
        )
