"""
Farm management entity models.

A farmer owns farms, a farm is divided into fields, and each field carries a
history of crop plans from planting through harvest.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlmodel import Field, Text

from agrilink.core.models.domain.enums import AreaUnit, CropPlanStatus

from ..base import TimestampedBase


class Farm(TimestampedBase, table=True):
    """A farm owned by a farmer. Deleting a farm only clears ``active``.

    Table: farms
    """

    __tablename__ = "farms"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    farmer_id: uuid.UUID = Field(index=True)
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, sa_type=Text)
    location: Optional[str] = Field(default=None, max_length=255)
    crop_types: Optional[str] = Field(default=None, max_length=512, description="Comma separated crop names")
    farm_image_url: Optional[str] = Field(default=None, max_length=1024)
    total_area: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    area_unit: AreaUnit = Field(default=AreaUnit.HECTARE)
    latitude: Optional[float] = Field(default=None)
    longitude: Optional[float] = Field(default=None)
    active: bool = Field(default=True, index=True)

    def __repr__(self) -> str:
        return f"Farm(id={self.id}, name={self.name}, active={self.active})"


class FarmField(TimestampedBase, table=True):
    """A cultivated plot inside a farm.

    Table: fields
    """

    __tablename__ = "fields"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    farm_id: uuid.UUID = Field(foreign_key="farms.id", index=True)
    name: str = Field(max_length=255)
    area: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    area_unit: AreaUnit = Field(default=AreaUnit.HECTARE)
    soil_type: Optional[str] = Field(default=None, max_length=64)
    irrigation_type: Optional[str] = Field(default=None, max_length=64)
    active: bool = Field(default=True)

    def __repr__(self) -> str:
        return f"FarmField(id={self.id}, name={self.name}, farm_id={self.farm_id})"


class CropPlan(TimestampedBase, table=True):
    """One planting on a field and, once harvested, its yield.

    Table: crop_plans
    """

    __tablename__ = "crop_plans"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    field_id: uuid.UUID = Field(foreign_key="fields.id", index=True)
    crop_name: str = Field(max_length=128)
    crop_variety: Optional[str] = Field(default=None, max_length=128)
    planting_date: Optional[date] = Field(default=None)
    expected_harvest_date: Optional[date] = Field(default=None)
    actual_harvest_date: Optional[date] = Field(default=None)
    expected_yield: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    actual_yield: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    yield_unit: str = Field(default="KG", max_length=16)
    status: CropPlanStatus = Field(default=CropPlanStatus.PLANNED, index=True)
    notes: Optional[str] = Field(default=None, sa_type=Text)

    @property
    def is_active(self) -> bool:
        return self.status in (CropPlanStatus.PLANTED, CropPlanStatus.GROWING)

    def __repr__(self) -> str:
        return f"CropPlan(id={self.id}, crop={self.crop_name}, status={self.status})"
