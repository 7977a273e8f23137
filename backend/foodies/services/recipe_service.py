"""
Foodies Backend — Recipe Service
==================================

What:  Business logic for listing, reading, creating and deleting recipes.
Why:   Keeps ownership rules, duplicate detection and the image lifecycle
       out of the route handlers.
How:   Stateless; every method receives the request's AsyncSession. Query
       results are converted to pydantic response models here so routes only
       deal with HTTP concerns.
Who:   Called by routes/recipes.py; FavoriteService reuses the row → response
       helpers for the favorites page.

Create Flow (POST /api/recipes):
    ┌───────────┐    ┌──────────────┐    ┌─────────────┐    ┌────────────┐
    │ Validated │───▶│  Duplicate   │───▶│ Store image │───▶│ Insert row │
    │  payload  │    │  title check │    │ (optional)  │    │ + lines    │
    └───────────┘    └──────────────┘    └─────────────┘    └────────────┘
    If the insert fails the stored image is removed again.

Delete Flow (DELETE /api/recipes/{id}):
    404 if missing → 403 if not owner → delete favorites, ingredient lines
    and the recipe row in the request transaction. The route removes the
    image file in a background task, after the transaction has committed.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foodies.exceptions import (
    ConflictError,
    DatabaseError,
    ForbiddenError,
    FoodiesError,
    NotFoundError,
)
from foodies.models.favorite import Favorite
from foodies.models.recipe import Recipe, RecipeIngredient
from foodies.schemas.recipe import (
    IngredientItem,
    PopularRecipeResponse,
    RecipeCreate,
    RecipeResponse,
)
from foodies.services.file_service import file_service

logger = logging.getLogger(__name__)


class UploadedImage:
    """The parts of an uploaded file the service needs, detached from Starlette."""

    def __init__(self, filename: str, content: bytes, content_length: Optional[int] = None):
        self.filename = filename
        self.content = content
        self.content_length = content_length


# ══════════════════════════════════════════════════════════════════════════
# Row → response helpers
# ══════════════════════════════════════════════════════════════════════════


async def load_ingredients(
    db: AsyncSession,
    recipe_ids: Sequence[int],
) -> Dict[int, List[RecipeIngredient]]:
    """
    Fetch ingredient lines for many recipes in one query.

    Returns:
        recipe_id → lines in submitted order. Recipes without lines are
        absent from the dict.
    """
    if not recipe_ids:
        return {}
    result = await db.execute(
        select(RecipeIngredient)
        .where(RecipeIngredient.recipe_id.in_(list(recipe_ids)))
        .order_by(RecipeIngredient.recipe_id, RecipeIngredient.position)
    )
    grouped: Dict[int, List[RecipeIngredient]] = defaultdict(list)
    for line in result.scalars().all():
        grouped[line.recipe_id].append(line)
    return grouped


def to_response(recipe: Recipe, lines: Sequence[RecipeIngredient]) -> RecipeResponse:
    return RecipeResponse(
        id=recipe.id,
        title=recipe.title,
        description=recipe.description,
        category=recipe.category,
        area=recipe.area,
        time=recipe.time,
        ingredients=[
            IngredientItem(ingredient_id=line.ingredient_id, quantity=line.quantity)
            for line in lines
        ],
        instructions=recipe.instructions,
        thumb=recipe.thumb,
        owner_id=recipe.owner_id,
        created_at=recipe.created_at,
    )


async def to_responses(db: AsyncSession, recipes: Sequence[Recipe]) -> List[RecipeResponse]:
    """Convert rows to responses, preserving the input order."""
    lines = await load_ingredients(db, [recipe.id for recipe in recipes])
    return [to_response(recipe, lines.get(recipe.id, [])) for recipe in recipes]


class RecipeService:
    """
    Business logic for recipes.

    Error Handling Strategy:
        Domain errors (NotFound, Forbidden, Conflict, Validation) propagate
        unchanged. SQLAlchemy errors are logged with their type and wrapped
        in DatabaseError so the client only ever sees a generic 500 message.
    """

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_recipes(
        self,
        db: AsyncSession,
        category: Optional[str] = None,
        area: Optional[str] = None,
        ingredient: Optional[str] = None,
    ) -> List[RecipeResponse]:
        """
        All recipes, newest first, optionally narrowed by exact filters.

        No match is an empty list, not an error.
        """
        query = select(Recipe)
        if category:
            query = query.where(Recipe.category == category)
        if area:
            query = query.where(Recipe.area == area)
        if ingredient:
            query = query.where(
                Recipe.id.in_(
                    select(RecipeIngredient.recipe_id).where(
                        RecipeIngredient.ingredient_id == ingredient
                    )
                )
            )
        query = query.order_by(Recipe.created_at.desc(), Recipe.id.desc())

        try:
            result = await db.execute(query)
            recipes = list(result.scalars().all())
            return await to_responses(db, recipes)
        except SQLAlchemyError as e:
            logger.error("Database error listing recipes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve recipes. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def list_popular_recipes(
        self,
        db: AsyncSession,
        limit: Optional[int] = None,
    ) -> List[PopularRecipeResponse]:
        """
        Recipes ranked by how many users favorited them.

        Ordering:
            favorites_count DESC, then created_at DESC, then id DESC. The two
            secondary keys make the order stable between calls, so a recipe
            with more favorites never appears after one with fewer and equal
            counts always come back in the same order.

        Query plan:
            SELECT recipes.*, count(favorites.id) FROM recipes
            LEFT OUTER JOIN favorites ON favorites.recipe_id = recipes.id
            GROUP BY recipes.id ORDER BY 2 DESC, created_at DESC, id DESC
        """
        favorites_count = func.count(Favorite.id).label("favorites_count")
        query = (
            select(Recipe, favorites_count)
            .outerjoin(Favorite, Favorite.recipe_id == Recipe.id)
            .group_by(Recipe.id)
            .order_by(favorites_count.desc(), Recipe.created_at.desc(), Recipe.id.desc())
        )
        if limit:
            query = query.limit(limit)

        try:
            result = await db.execute(query)
            rows = result.all()
            lines = await load_ingredients(db, [recipe.id for recipe, _ in rows])
        except SQLAlchemyError as e:
            logger.error("Database error ranking recipes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve popular recipes. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [
            PopularRecipeResponse(
                **to_response(recipe, lines.get(recipe.id, [])).model_dump(),
                favorites_count=count,
            )
            for recipe, count in rows
        ]

    async def list_own_recipes(self, db: AsyncSession, owner_id: int) -> List[RecipeResponse]:
        """Every recipe the user created, newest first."""
        try:
            result = await db.execute(
                select(Recipe)
                .where(Recipe.owner_id == owner_id)
                .order_by(Recipe.created_at.desc(), Recipe.id.desc())
            )
            return await to_responses(db, list(result.scalars().all()))
        except SQLAlchemyError as e:
            logger.error("Database error listing recipes of user %s: %s", owner_id, str(e))
            raise DatabaseError(
                message="Could not retrieve your recipes. Please try again.",
                context={"owner_id": owner_id},
            )

    async def get_recipe(self, db: AsyncSession, recipe_id: int) -> RecipeResponse:
        """
        Raises:
            NotFoundError: no recipe with this id (→ 404)
        """
        recipe = await self._get_row(db, recipe_id)
        lines = await load_ingredients(db, [recipe.id])
        return to_response(recipe, lines.get(recipe.id, []))

    async def _get_row(self, db: AsyncSession, recipe_id: int) -> Recipe:
        try:
            result = await db.execute(select(Recipe).where(Recipe.id == recipe_id))
            recipe = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching recipe %s: %s", recipe_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the recipe. Please try again.",
                context={"recipe_id": recipe_id},
            )
        if recipe is None:
            raise NotFoundError(resource="recipe", resource_id=str(recipe_id))
        return recipe

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_recipe(
        self,
        db: AsyncSession,
        owner_id: int,
        payload: RecipeCreate,
        image: Optional[UploadedImage] = None,
    ) -> RecipeResponse:
        """
        Persist a new recipe owned by `owner_id`.

        Duplicate policy:
            An owner cannot have two recipes whose titles are equal after
            trimming and case folding. Different owners may reuse a title.

        Raises:
            ConflictError: duplicate title for this owner (→ 409)
            ValidationError: image rejected by FileService (→ 400)
            FileStorageError / DatabaseError: infrastructure failure (→ 500)
        """
        duplicate = await db.execute(
            select(Recipe.id).where(
                Recipe.owner_id == owner_id,
                func.lower(Recipe.title) == payload.title.lower(),
            )
        )
        if duplicate.scalar_one_or_none() is not None:
            raise ConflictError(
                message="Recipe already exists",
                context={"title": payload.title},
            )

        absolute_path: Optional[str] = None
        thumb: Optional[str] = None
        if image is not None:
            absolute_path, relative_path = await file_service.validate_and_store(
                filename=image.filename,
                content=image.content,
                content_length=image.content_length,
            )
            thumb = file_service.public_url(relative_path)

        try:
            recipe = Recipe(
                title=payload.title,
                description=payload.description,
                category=payload.category,
                area=payload.area,
                time=payload.time,
                instructions=payload.instructions,
                thumb=thumb,
                owner_id=owner_id,
            )
            db.add(recipe)
            await db.flush()

            lines = [
                RecipeIngredient(
                    recipe_id=recipe.id,
                    position=position,
                    ingredient_id=item.ingredient_id,
                    quantity=item.quantity,
                )
                for position, item in enumerate(payload.ingredients)
            ]
            db.add_all(lines)
            await db.flush()
        except Exception as e:
            if absolute_path:
                await file_service.cleanup_file(absolute_path)
            if isinstance(e, FoodiesError):
                raise
            logger.error("Unexpected error creating recipe: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="An error occurred while saving your recipe. Please try again.",
                context={"original_error": type(e).__name__},
            )

        logger.info("Recipe %s created by user %s", recipe.id, owner_id)
        return to_response(recipe, lines)

    async def delete_recipe(self, db: AsyncSession, owner_id: int, recipe_id: int) -> RecipeResponse:
        """
        Delete a recipe owned by `owner_id`, together with every favorite
        that references it.

        Returns:
            The deleted recipe, as it was before deletion. Its thumb URL
            tells the caller which stored image to remove.

        Raises:
            NotFoundError: no such recipe (→ 404)
            ForbiddenError: requester is not the owner (→ 403); nothing is
                            touched in that case
        """
        recipe = await self._get_row(db, recipe_id)
        if recipe.owner_id != owner_id:
            raise ForbiddenError(
                message="Only the owner can delete this recipe",
                context={"recipe_id": recipe_id, "owner_id": recipe.owner_id, "requester_id": owner_id},
            )

        lines = await load_ingredients(db, [recipe.id])
        deleted = to_response(recipe, lines.get(recipe.id, []))

        try:
            await db.execute(delete(Favorite).where(Favorite.recipe_id == recipe_id))
            await db.execute(delete(RecipeIngredient).where(RecipeIngredient.recipe_id == recipe_id))
            await db.delete(recipe)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting recipe %s: %s", recipe_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the recipe. Please try again.",
                context={"recipe_id": recipe_id},
            )

        logger.info("Recipe %s deleted by owner %s", recipe_id, owner_id)
        return deleted


recipe_service = RecipeService()
