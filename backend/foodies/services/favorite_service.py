"""
Foodies Backend — Favorites Service
=====================================

What:  Add, remove and page through a user's favorite recipes.
Why:   The favorites relation is the one place where two requests can race
       on the same row; the rules for that live here.
How:   Stateless; each call receives the request's AsyncSession.

Semantics:
    add     recipe missing → 404 | pair exists → 409 | else insert
    remove  recipe missing → 404 | pair absent → 409 | else delete
    list    page/limit (validated upstream), newest favorite first

Concurrency:
    Two simultaneous adds of the same pair both pass the existence check.
    The second INSERT then violates uq_favorites_user_recipe; the resulting
    IntegrityError is reported as the same 409 the pre-check would have
    produced. A recipe deleted between the check and the INSERT trips the
    foreign key instead; after rolling back, the recipe is looked up again
    and that case is a 404.

Why 409 for removing a pair that does not exist:
    The recipe itself exists, so 404 would be misleading; the request
    conflicts with the current state of the user's favorites.
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foodies.exceptions import ConflictError, DatabaseError, NotFoundError
from foodies.models.favorite import Favorite
from foodies.models.recipe import Recipe
from foodies.schemas.common import page_offset
from foodies.schemas.recipe import FavoriteActionResponse, FavoritesPageResponse
from foodies.services.recipe_service import to_responses

logger = logging.getLogger(__name__)


class FavoriteService:

    async def _ensure_recipe_exists(self, db: AsyncSession, recipe_id: int) -> None:
        result = await db.execute(select(Recipe.id).where(Recipe.id == recipe_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="recipe", resource_id=str(recipe_id))

    async def _find(self, db: AsyncSession, user_id: int, recipe_id: int):
        result = await db.execute(
            select(Favorite).where(
                Favorite.user_id == user_id,
                Favorite.recipe_id == recipe_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_to_favorites(
        self,
        db: AsyncSession,
        user_id: int,
        recipe_id: int,
    ) -> FavoriteActionResponse:
        """
        Raises:
            NotFoundError: recipe does not exist, or was deleted before the
                insert landed (→ 404)
            ConflictError: already in favorites, including a lost race (→ 409)
        """
        await self._ensure_recipe_exists(db, recipe_id)

        if await self._find(db, user_id, recipe_id) is not None:
            raise ConflictError(
                message="Recipe already in favorites",
                context={"recipe_id": recipe_id},
            )

        db.add(Favorite(user_id=user_id, recipe_id=recipe_id))
        try:
            await db.flush()
        except IntegrityError:
            logger.info(
                "Concurrent favorite insert lost the race: user=%s recipe=%s",
                user_id,
                recipe_id,
            )
            # Either the pair was inserted first or the recipe was deleted
            await db.rollback()
            await self._ensure_recipe_exists(db, recipe_id)
            raise ConflictError(
                message="Recipe already in favorites",
                context={"recipe_id": recipe_id},
            )

        logger.info("User %s added recipe %s to favorites", user_id, recipe_id)
        return FavoriteActionResponse(message="Recipe added to favorites", recipe_id=recipe_id)

    async def remove_from_favorites(
        self,
        db: AsyncSession,
        user_id: int,
        recipe_id: int,
    ) -> FavoriteActionResponse:
        """
        Raises:
            NotFoundError: recipe does not exist (→ 404)
            ConflictError: recipe is not in this user's favorites (→ 409)
        """
        await self._ensure_recipe_exists(db, recipe_id)

        result = await db.execute(
            delete(Favorite).where(
                Favorite.user_id == user_id,
                Favorite.recipe_id == recipe_id,
            )
        )
        if result.rowcount == 0:
            raise ConflictError(
                message="Recipe not in favorites",
                context={"recipe_id": recipe_id},
            )

        logger.info("User %s removed recipe %s from favorites", user_id, recipe_id)
        return FavoriteActionResponse(message="Recipe removed from favorites", recipe_id=recipe_id)

    async def list_favorites(
        self,
        db: AsyncSession,
        user_id: int,
        page: int = 1,
        limit: int = 10,
    ) -> FavoritesPageResponse:
        """
        One page of the user's favorite recipes.

        Ordering:
            favorites.created_at DESC, favorites.id DESC. The id tie-break
            keeps pages disjoint even when two favorites share a timestamp.

        Query plan:
            SELECT recipes.* FROM favorites JOIN recipes ON recipes.id = favorites.recipe_id
            WHERE favorites.user_id = :uid
            ORDER BY favorites.created_at DESC, favorites.id DESC
            LIMIT :limit OFFSET min((:page - 1) * :limit, MAX_OFFSET)
        """
        offset = page_offset(page, limit)

        try:
            result = await db.execute(
                select(Recipe)
                .join(Favorite, Favorite.recipe_id == Recipe.id)
                .where(Favorite.user_id == user_id)
                .order_by(Favorite.created_at.desc(), Favorite.id.desc())
                .limit(limit)
                .offset(offset)
            )
            recipes = list(result.scalars().all())

            count_result = await db.execute(
                select(func.count(Favorite.id)).where(Favorite.user_id == user_id)
            )
            total = count_result.scalar() or 0

            items = await to_responses(db, recipes)
        except SQLAlchemyError as e:
            logger.error("Database error listing favorites of user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve favorites. Please try again.",
                context={"user_id": user_id},
            )

        return FavoritesPageResponse(page=page, limit=limit, total=total, recipes=items)


favorite_service = FavoriteService()
