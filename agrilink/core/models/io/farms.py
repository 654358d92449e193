"""
Farm management I/O models.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from agrilink.core.models.domain.enums import AreaUnit, CropPlanStatus


class FarmCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=255)
    crop_types: Optional[str] = Field(default=None, description="Comma separated crop names")
    farm_image_url: Optional[str] = None
    total_area: Optional[Decimal] = Field(default=None, ge=0)
    area_unit: AreaUnit = AreaUnit.HECTARE
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class FarmUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = None
    crop_types: Optional[str] = None
    farm_image_url: Optional[str] = None
    total_area: Optional[Decimal] = Field(default=None, ge=0)
    area_unit: Optional[AreaUnit] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class FarmOnboardingRequest(BaseModel):
    """First-run wizard payload: creates or updates the farmer's first farm."""

    farm_name: str = Field(min_length=1, max_length=255)
    city: Optional[str] = None
    state: Optional[str] = None
    crop_types: Optional[str] = None
    description: Optional[str] = None
    farm_image_url: Optional[str] = None
    total_area: Optional[Decimal] = Field(default=None, ge=0)
    area_unit: AreaUnit = AreaUnit.HECTARE
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class FarmRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    farmer_id: uuid.UUID
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    crop_types: Optional[str] = None
    farm_image_url: Optional[str] = None
    total_area: Optional[float] = None
    area_unit: AreaUnit
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    active: bool
    created_at: datetime
    updated_at: datetime


class FieldCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    area: Optional[Decimal] = Field(default=None, ge=0)
    area_unit: AreaUnit = AreaUnit.HECTARE
    soil_type: Optional[str] = None
    irrigation_type: Optional[str] = None


class FieldUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    area: Optional[Decimal] = Field(default=None, ge=0)
    area_unit: Optional[AreaUnit] = None
    soil_type: Optional[str] = None
    irrigation_type: Optional[str] = None


class FieldRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    farm_id: uuid.UUID
    name: str
    area: Optional[float] = None
    area_unit: AreaUnit
    soil_type: Optional[str] = None
    irrigation_type: Optional[str] = None
    active: bool
    created_at: datetime
    updated_at: datetime


class CropPlanCreate(BaseModel):
    crop_name: str = Field(min_length=1, max_length=128)
    crop_variety: Optional[str] = None
    planting_date: Optional[date] = None
    expected_harvest_date: Optional[date] = None
    expected_yield: Optional[Decimal] = Field(default=None, ge=0)
    yield_unit: str = "KG"
    status: Optional[CropPlanStatus] = None
    notes: Optional[str] = None


class CropPlanUpdate(BaseModel):
    crop_name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    crop_variety: Optional[str] = None
    planting_date: Optional[date] = None
    expected_harvest_date: Optional[date] = None
    expected_yield: Optional[Decimal] = Field(default=None, ge=0)
    yield_unit: Optional[str] = None
    status: Optional[CropPlanStatus] = None
    notes: Optional[str] = None


class HarvestRecord(BaseModel):
    actual_yield: Decimal = Field(ge=0)
    actual_harvest_date: Optional[date] = Field(default=None, description="Defaults to today")


class CropPlanRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    field_id: uuid.UUID
    crop_name: str
    crop_variety: Optional[str] = None
    planting_date: Optional[date] = None
    expected_harvest_date: Optional[date] = None
    actual_harvest_date: Optional[date] = None
    expected_yield: Optional[float] = None
    actual_yield: Optional[float] = None
    yield_unit: str
    status: CropPlanStatus
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# =====================================================================
# Analytics
# =====================================================================


class YieldStats(BaseModel):
    total_expected: float = 0.0
    total_actual: float = 0.0
    efficiency: float = 0.0


class MonthlyActivity(BaseModel):
    month: str
    planted: int = 0
    harvested: int = 0


class FieldSummary(BaseModel):
    field_id: uuid.UUID
    field_name: str
    area: Optional[float] = None
    area_unit: AreaUnit
    current_crop: str = "None"
    status: str = "IDLE"
    crop_plan_count: int = 0


class FarmAnalytics(BaseModel):
    farm_id: uuid.UUID
    farm_name: str
    total_fields: int = 0
    total_crop_plans: int = 0
    active_crop_plans: int = 0
    completed_harvests: int = 0
    crop_distribution: Dict[str, int] = Field(default_factory=dict)
    yield_stats: YieldStats = Field(default_factory=YieldStats)
    monthly_activity: List[MonthlyActivity] = Field(default_factory=list)
    field_summaries: List[FieldSummary] = Field(default_factory=list)
    utilization_percent: float = 0.0


class UpcomingActivity(BaseModel):
    activity_type: str = Field(description="PLANTING or HARVESTING")
    crop_name: str
    field_name: str
    farm_name: str
    scheduled_date: date
    days_until: int


class RecentHarvest(BaseModel):
    crop_name: str
    field_name: str
    harvest_date: Optional[date] = None
    actual_yield: Optional[float] = None
    expected_yield: Optional[float] = None
    yield_unit: str


class DashboardSummary(BaseModel):
    total_farms: int = 0
    total_fields: int = 0
    total_area: float = 0.0
    active_crops: int = 0
    top_crops: Dict[str, int] = Field(default_factory=dict)
    upcoming_activities: List[UpcomingActivity] = Field(default_factory=list)
    recent_harvests: List[RecentHarvest] = Field(default_factory=list)
    average_yield_efficiency: float = 0.0
