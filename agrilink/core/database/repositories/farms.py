"""
Farm repositories: farms, fields and crop plans.
"""

import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.farms import CropPlan, Farm, FarmField
from .base import SQLModelRepository


class FarmRepository(SQLModelRepository[Farm]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Farm)

    async def get_active(self, farm_id: uuid.UUID) -> Optional[Farm]:
        return await self.fetch_one(select(Farm).where(Farm.id == farm_id, Farm.active.is_(True)))

    async def find_active_by_farmer(self, farmer_id: uuid.UUID) -> List[Farm]:
        stmt = (
            select(Farm)
            .where(Farm.farmer_id == farmer_id, Farm.active.is_(True))
            .order_by(Farm.created_at.asc())
        )
        return await self.fetch_all(stmt)

    async def find_all_active(self) -> List[Farm]:
        return await self.fetch_all(select(Farm).where(Farm.active.is_(True)).order_by(Farm.created_at.desc()))


class FieldRepository(SQLModelRepository[FarmField]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, FarmField)

    async def find_active_by_farm(self, farm_id: uuid.UUID) -> List[FarmField]:
        stmt = (
            select(FarmField)
            .where(FarmField.farm_id == farm_id, FarmField.active.is_(True))
            .order_by(FarmField.created_at.asc())
        )
        return await self.fetch_all(stmt)

    async def find_active_by_farms(self, farm_ids: List[uuid.UUID]) -> List[FarmField]:
        if not farm_ids:
            return []
        stmt = select(FarmField).where(FarmField.farm_id.in_(farm_ids), FarmField.active.is_(True))
        return await self.fetch_all(stmt)


class CropPlanRepository(SQLModelRepository[CropPlan]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CropPlan)

    async def find_by_field(self, field_id: uuid.UUID) -> List[CropPlan]:
        stmt = select(CropPlan).where(CropPlan.field_id == field_id).order_by(CropPlan.created_at.desc())
        return await self.fetch_all(stmt)

    async def find_by_fields(self, field_ids: List[uuid.UUID]) -> List[CropPlan]:
        if not field_ids:
            return []
        stmt = select(CropPlan).where(CropPlan.field_id.in_(field_ids)).order_by(CropPlan.created_at.desc())
        return await self.fetch_all(stmt)
