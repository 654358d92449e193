"""
CSV export of a farmer's farm records.

Builds downloadable reports from the farmer's active farms: one row per farm,
per field, per crop plan, plus a summary built from the dashboard analytics.
Only local data is read.
"""

import csv
import io
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database import utc_now
from agrilink.core.database.entities import CropPlan, FarmField
from agrilink.core.database.repositories import CropPlanRepository, FarmRepository, FieldRepository
from agrilink.core.logging_config import get_logger

from .farm_analytics import FarmAnalyticsService

logger = get_logger(__name__)

FARM_HEADER = [
    "Farm Name", "Location", "Total Area", "Area Unit", "Total Fields", "Active Crops", "Status", "Created At"
]
FIELD_HEADER = [
    "Farm Name", "Field Name", "Area", "Area Unit", "Soil Type", "Irrigation Type", "Current Crop", "Status"
]
CROP_PLAN_HEADER = [
    "Farm Name",
    "Field Name",
    "Crop Name",
    "Variety",
    "Planting Date",
    "Expected Harvest",
    "Expected Yield",
    "Actual Yield",
    "Status",
]
MISSING = "-"


def amount(value: Optional[Decimal]) -> str:
    """Two decimal places; missing amounts export as ``0.00``."""
    return f"{Decimal(value or 0):.2f}"


def iso_date(value: Optional[date]) -> str:
    return value.isoformat() if value else MISSING


def to_csv(header: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def export_filename(prefix: str, today: Optional[date] = None) -> str:
    """``<prefix>_YYYY-MM-DD.csv``."""
    return f"{prefix}_{(today or date.today()).isoformat()}.csv"


class FarmExportService:
    def __init__(self, session: AsyncSession) -> None:
        self.farms = FarmRepository(session)
        self.fields = FieldRepository(session)
        self.crop_plans = CropPlanRepository(session)
        self.analytics = FarmAnalyticsService(session)

    async def _load(self, farmer_id: uuid.UUID):
        farms = await self.farms.find_active_by_farmer(farmer_id)
        fields = await self.fields.find_active_by_farms([farm.id for farm in farms])
        plans = await self.crop_plans.find_by_fields([field.id for field in fields])
        return farms, fields, plans

    async def export_farms(self, farmer_id: uuid.UUID) -> str:
        logger.info(f"Exporting farms as CSV for farmer {farmer_id}", extra={"farmer_id": str(farmer_id)})
        farms, fields, plans = await self._load(farmer_id)
        field_farm = {field.id: field.farm_id for field in fields}

        rows = []
        for farm in farms:
            active_crops = sum(1 for plan in plans if plan.is_active and field_farm.get(plan.field_id) == farm.id)
            rows.append(
                [
                    farm.name,
                    farm.location or "",
                    amount(farm.total_area),
                    farm.area_unit.value,
                    sum(1 for field in fields if field.farm_id == farm.id),
                    active_crops,
                    "ACTIVE" if farm.active else "INACTIVE",
                    farm.created_at.date().isoformat() if farm.created_at else "",
                ]
            )
        return to_csv(FARM_HEADER, rows)

    async def export_fields(self, farmer_id: uuid.UUID) -> str:
        logger.info(f"Exporting fields as CSV for farmer {farmer_id}", extra={"farmer_id": str(farmer_id)})
        farms, fields, plans = await self._load(farmer_id)
        farm_names = {farm.id: farm.name for farm in farms}
        current: Dict[uuid.UUID, CropPlan] = {}
        for plan in plans:
            if plan.is_active:
                current.setdefault(plan.field_id, plan)

        rows = [
            [
                farm_names[field.farm_id],
                field.name,
                amount(field.area),
                field.area_unit.value,
                field.soil_type or MISSING,
                field.irrigation_type or MISSING,
                current[field.id].crop_name if field.id in current else MISSING,
                "ACTIVE" if field.active else "INACTIVE",
            ]
            for field in fields
        ]
        return to_csv(FIELD_HEADER, rows)

    async def export_crop_plans(self, farmer_id: uuid.UUID) -> str:
        logger.info(f"Exporting crop plans as CSV for farmer {farmer_id}", extra={"farmer_id": str(farmer_id)})
        farms, fields, plans = await self._load(farmer_id)
        farm_names = {farm.id: farm.name for farm in farms}
        fields_by_id: Dict[uuid.UUID, FarmField] = {field.id: field for field in fields}

        rows = []
        for plan in plans:
            field = fields_by_id[plan.field_id]
            rows.append(
                [
                    farm_names[field.farm_id],
                    field.name,
                    plan.crop_name,
                    plan.crop_variety or MISSING,
                    iso_date(plan.planting_date),
                    iso_date(plan.expected_harvest_date),
                    amount(plan.expected_yield),
                    amount(plan.actual_yield),
                    plan.status.value,
                ]
            )
        return to_csv(CROP_PLAN_HEADER, rows)

    async def export_analytics_summary(
        self, farmer_id: uuid.UUID, today: Optional[date] = None, now: Optional[datetime] = None
    ) -> str:
        """Sectioned report: overview, yield statistics and top crops."""
        logger.info(f"Exporting analytics summary as CSV for farmer {farmer_id}", extra={"farmer_id": str(farmer_id)})
        summary = await self.analytics.get_dashboard_summary(farmer_id, today=today)

        rows: List[List[Any]] = [
            ["Generated", (now or utc_now()).replace(microsecond=0).isoformat()],
            [],
            ["OVERVIEW"],
            ["Total Farms", summary.total_farms],
            ["Total Fields", summary.total_fields],
            ["Total Area Managed", f"{summary.total_area:.2f}"],
            ["Active Crops", summary.active_crops],
            [],
            ["YIELD STATISTICS"],
            ["Average Yield Efficiency", f"{summary.average_yield_efficiency:.1f}%"],
            [],
            ["TOP CROPS"],
            ["Crop", "Count"],
        ]
        rows.extend([crop, count] for crop, count in summary.top_crops.items())
        return to_csv(["AgriLink Analytics Report"], rows)
