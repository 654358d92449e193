"""
Produce categories.
"""

import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database.entities import Category
from agrilink.core.database.repositories import CategoryRepository
from agrilink.core.exceptions import BadRequestException, ResourceNotFoundException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.io.marketplace import CategoryCreate, CategoryRead

logger = get_logger(__name__)


class CategoryService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.categories = CategoryRepository(session)

    async def create_category(self, request: CategoryCreate) -> CategoryRead:
        if await self.categories.get_by_name(request.name):
            raise BadRequestException("Category already exists")
        if request.parent_id is not None:
            await self._get(request.parent_id)

        category = await self.categories.create(Category(**request.model_dump()))
        await self.session.commit()
        logger.info(f"Created category '{category.name}'", extra={"category_id": str(category.id)})
        return CategoryRead.model_validate(category)

    async def get_all_categories(self) -> List[CategoryRead]:
        """Active categories with the number of ACTIVE listings in each."""
        counts = await self.categories.active_listing_counts()
        return [
            CategoryRead.model_validate(category).model_copy(update={"product_count": counts.get(category.id, 0)})
            for category in await self.categories.find_active()
        ]

    async def get_root_categories(self) -> List[CategoryRead]:
        return [CategoryRead.model_validate(category) for category in await self.categories.find_roots()]

    async def get_subcategories(self, parent_id: uuid.UUID) -> List[CategoryRead]:
        await self._get(parent_id)
        return [CategoryRead.model_validate(category) for category in await self.categories.find_children(parent_id)]

    async def get_category(self, category_id: uuid.UUID) -> CategoryRead:
        return CategoryRead.model_validate(await self._get(category_id))

    async def _get(self, category_id: uuid.UUID) -> Category:
        category = await self.categories.get_by_id(category_id)
        if category is None:
            raise ResourceNotFoundException("Category", "id", category_id)
        return category
