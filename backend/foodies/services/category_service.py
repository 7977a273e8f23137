"""
Foodies Backend — Category Service
====================================

What:  Lists and creates recipe categories.
Why:   The frontend's category grid and the recipe form both read this list.
"""

import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from foodies.exceptions import ConflictError
from foodies.models.category import Category
from foodies.schemas.category import CategoryCreate, CategoryResponse

logger = logging.getLogger(__name__)


class CategoryService:

    async def list_categories(self, db: AsyncSession) -> List[CategoryResponse]:
        """All categories in alphabetical order."""
        result = await db.execute(select(Category).order_by(Category.name))
        return [CategoryResponse.model_validate(row) for row in result.scalars().all()]

    async def create_category(self, db: AsyncSession, payload: CategoryCreate) -> CategoryResponse:
        """
        Raises:
            ConflictError: a category with this name exists, compared
                           case-insensitively (→ 409)
        """
        existing = await db.execute(
            select(Category.id).where(func.lower(Category.name) == payload.name.lower())
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(
                message=f"Category '{payload.name}' already exists",
                context={"name": payload.name},
            )

        category = Category(
            name=payload.name,
            description=payload.description,
            thumb=str(payload.thumb) if payload.thumb else None,
        )
        db.add(category)
        try:
            await db.flush()
        except IntegrityError:
            raise ConflictError(
                message=f"Category '{payload.name}' already exists",
                context={"name": payload.name},
            )

        logger.info("Category created: %s (id=%s)", category.name, category.id)
        return CategoryResponse.model_validate(category)


category_service = CategoryService()
