"""
Farm management service: farms, fields and crop plans.

Farms and fields are soft deleted through their ``active`` flag. Every write
checks that the caller owns the farm the record belongs to.
"""

import uuid
from datetime import date
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database.entities import CropPlan, Farm, FarmField
from agrilink.core.database.repositories import CropPlanRepository, FarmRepository, FieldRepository
from agrilink.core.exceptions import ForbiddenException, ResourceNotFoundException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import CropPlanStatus
from agrilink.core.models.io.farms import (
    CropPlanCreate,
    CropPlanUpdate,
    FarmCreate,
    FarmOnboardingRequest,
    FarmUpdate,
    FieldCreate,
    FieldUpdate,
    HarvestRecord,
)

logger = get_logger(__name__)

NO_FARM_ACCESS = "You do not have access to this farm"


def onboarding_location(city: str | None, state: str | None) -> str | None:
    """Join the present parts as ``"<city>, <state>"``."""
    parts = [part.strip() for part in (city, state) if part and part.strip()]
    return ", ".join(parts) or None


class FarmService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.farms = FarmRepository(session)
        self.fields = FieldRepository(session)
        self.crop_plans = CropPlanRepository(session)

    # -----------------------------------------------------------------
    # Farms
    # -----------------------------------------------------------------

    async def create_farm(self, farmer_id: uuid.UUID, request: FarmCreate) -> Farm:
        farm = Farm(farmer_id=farmer_id, **request.model_dump())
        farm = await self.farms.create(farm)
        await self.session.commit()
        logger.info(f"Created farm {farm.id} for farmer {farmer_id}", extra={"farm_id": str(farm.id)})
        return farm

    async def get_farm(self, farm_id: uuid.UUID) -> Farm:
        farm = await self.farms.get_active(farm_id)
        if farm is None:
            raise ResourceNotFoundException("Farm", "id", farm_id)
        return farm

    async def get_farm_for_owner(self, farm_id: uuid.UUID, farmer_id: uuid.UUID) -> Farm:
        farm = await self.get_farm(farm_id)
        if farm.farmer_id != farmer_id:
            raise ForbiddenException(NO_FARM_ACCESS)
        return farm

    async def get_farms_by_farmer(self, farmer_id: uuid.UUID) -> List[Farm]:
        return await self.farms.find_active_by_farmer(farmer_id)

    async def get_all_active_farms(self) -> List[Farm]:
        return await self.farms.find_all_active()

    async def update_farm(self, farm_id: uuid.UUID, farmer_id: uuid.UUID, request: FarmUpdate) -> Farm:
        farm = await self.get_farm_for_owner(farm_id, farmer_id)
        for key, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(farm, key, value)
        await self.farms.update(farm)
        await self.session.commit()
        return farm

    async def delete_farm(self, farm_id: uuid.UUID, farmer_id: uuid.UUID) -> None:
        farm = await self.get_farm_for_owner(farm_id, farmer_id)
        farm.active = False
        await self.farms.update(farm)
        await self.session.commit()
        logger.info(f"Deactivated farm {farm_id}", extra={"farm_id": str(farm_id)})

    async def onboard_farm(self, farmer_id: uuid.UUID, request: FarmOnboardingRequest) -> Farm:
        """Create the farmer's first farm, or update it when onboarding is repeated."""
        values = {
            "name": request.farm_name,
            "location": onboarding_location(request.city, request.state),
            "crop_types": request.crop_types,
            "description": request.description,
            "farm_image_url": request.farm_image_url,
            "total_area": request.total_area,
            "area_unit": request.area_unit,
            "latitude": request.latitude,
            "longitude": request.longitude,
        }
        existing = await self.farms.find_active_by_farmer(farmer_id)
        if existing:
            farm = existing[0]
            for key, value in values.items():
                if value is not None:
                    setattr(farm, key, value)
            await self.farms.update(farm)
        else:
            farm = await self.farms.create(Farm(farmer_id=farmer_id, **values))
        await self.session.commit()
        logger.info(f"Onboarded farm {farm.id} for farmer {farmer_id}", extra={"farm_id": str(farm.id)})
        return farm

    # -----------------------------------------------------------------
    # Fields
    # -----------------------------------------------------------------

    async def _get_field_for_owner(self, field_id: uuid.UUID, farmer_id: uuid.UUID) -> FarmField:
        field = await self.fields.get_by_id(field_id)
        if field is None or not field.active:
            raise ResourceNotFoundException("Field", "id", field_id)
        await self.get_farm_for_owner(field.farm_id, farmer_id)
        return field

    async def create_field(self, farm_id: uuid.UUID, farmer_id: uuid.UUID, request: FieldCreate) -> FarmField:
        await self.get_farm_for_owner(farm_id, farmer_id)
        field = await self.fields.create(FarmField(farm_id=farm_id, **request.model_dump()))
        await self.session.commit()
        return field

    async def get_fields_by_farm(self, farm_id: uuid.UUID) -> List[FarmField]:
        await self.get_farm(farm_id)
        return await self.fields.find_active_by_farm(farm_id)

    async def update_field(self, field_id: uuid.UUID, farmer_id: uuid.UUID, request: FieldUpdate) -> FarmField:
        field = await self._get_field_for_owner(field_id, farmer_id)
        for key, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(field, key, value)
        await self.fields.update(field)
        await self.session.commit()
        return field

    async def delete_field(self, field_id: uuid.UUID, farmer_id: uuid.UUID) -> None:
        field = await self._get_field_for_owner(field_id, farmer_id)
        field.active = False
        await self.fields.update(field)
        await self.session.commit()

    # -----------------------------------------------------------------
    # Crop plans
    # -----------------------------------------------------------------

    async def _get_crop_plan_for_owner(self, plan_id: uuid.UUID, farmer_id: uuid.UUID) -> CropPlan:
        plan = await self.crop_plans.get_by_id(plan_id)
        if plan is None:
            raise ResourceNotFoundException("CropPlan", "id", plan_id)
        await self._get_field_for_owner(plan.field_id, farmer_id)
        return plan

    async def create_crop_plan(self, field_id: uuid.UUID, farmer_id: uuid.UUID, request: CropPlanCreate) -> CropPlan:
        await self._get_field_for_owner(field_id, farmer_id)
        values = request.model_dump()
        values["status"] = request.status or CropPlanStatus.PLANNED
        plan = await self.crop_plans.create(CropPlan(field_id=field_id, **values))
        await self.session.commit()
        logger.info(
            f"Created crop plan {plan.id} ({plan.crop_name}) on field {field_id}",
            extra={"crop_plan_id": str(plan.id), "field_id": str(field_id)},
        )
        return plan

    async def get_crop_plans_by_field(self, field_id: uuid.UUID) -> List[CropPlan]:
        return await self.crop_plans.find_by_field(field_id)

    async def update_crop_plan(self, plan_id: uuid.UUID, farmer_id: uuid.UUID, request: CropPlanUpdate) -> CropPlan:
        plan = await self._get_crop_plan_for_owner(plan_id, farmer_id)
        for key, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(plan, key, value)
        await self.crop_plans.update(plan)
        await self.session.commit()
        return plan

    async def update_status(self, plan_id: uuid.UUID, farmer_id: uuid.UUID, status: CropPlanStatus) -> CropPlan:
        plan = await self._get_crop_plan_for_owner(plan_id, farmer_id)
        plan.status = status
        await self.crop_plans.update(plan)
        await self.session.commit()
        return plan

    async def record_harvest(self, plan_id: uuid.UUID, farmer_id: uuid.UUID, request: HarvestRecord) -> CropPlan:
        plan = await self._get_crop_plan_for_owner(plan_id, farmer_id)
        plan.actual_yield = request.actual_yield
        plan.actual_harvest_date = request.actual_harvest_date or date.today()
        plan.status = CropPlanStatus.HARVESTED
        await self.crop_plans.update(plan)
        await self.session.commit()
        logger.info(
            f"Recorded harvest of {plan.actual_yield} {plan.yield_unit} for crop plan {plan_id}",
            extra={"crop_plan_id": str(plan_id)},
        )
        return plan

    async def delete_crop_plan(self, plan_id: uuid.UUID, farmer_id: uuid.UUID) -> None:
        await self._get_crop_plan_for_owner(plan_id, farmer_id)
        await self.crop_plans.delete(plan_id)
        await self.session.commit()
