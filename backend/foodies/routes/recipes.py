"""
Foodies Backend — Recipe Route Handlers
=========================================

What:  /api/recipes: create, delete, list (all / popular / own / by id) and
       the favorites sub-resource.
Why:   Entry point for the core feature of the app.
How:   Input is validated by the validation layer dependencies, the
       authenticated user comes from get_current_user, and the work is
       delegated to RecipeService / FavoriteService.

Route order matters:
    /favorites, /popular and /own are declared before /{recipe_id} so the
    literal segments are never parsed as an id.
"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Path, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from foodies.database import get_db_session
from foodies.dependencies import get_current_user
from foodies.models.user import User
from foodies.schemas.common import MAX_ID, ErrorResponse, PaginationParams
from foodies.schemas.recipe import (
    FavoriteActionResponse,
    FavoriteRequest,
    FavoritesPageResponse,
    PopularParams,
    PopularRecipeListResponse,
    RecipeCreate,
    RecipeFilterParams,
    RecipeListResponse,
    RecipeResponse,
)
from foodies.services.favorite_service import favorite_service
from foodies.services.file_service import file_service
from foodies.services.recipe_service import UploadedImage, recipe_service
from foodies.validation import validate_body, validate_query

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes", tags=["Recipes"])

AUTH_ERRORS = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    401: {"description": "Missing or invalid access token", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=RecipeResponse,
    responses={
        **AUTH_ERRORS,
        409: {"description": "Recipe already exists", "model": ErrorResponse},
    },
    summary="Create a new recipe",
    description=(
        "multipart/form-data with the recipe fields and an optional image in the "
        "`thumb` part. `ingredients` is a JSON array of {ingredient_id, quantity}."
    ),
)
async def create_recipe(
    current_user: User = Depends(get_current_user),
    payload: RecipeCreate = Depends(validate_body(RecipeCreate)),
    thumb: Optional[UploadFile] = File(default=None, description="Recipe image (PNG, JPEG or WEBP)"),
    db: AsyncSession = Depends(get_db_session),
) -> RecipeResponse:
    image = None
    try:
        if thumb is not None and thumb.filename:
            content = await thumb.read()
            logger.info(
                "Recipe image received: filename=%s, size=%d bytes",
                thumb.filename,
                len(content),
            )
            image = UploadedImage(
                filename=thumb.filename,
                content=content,
                content_length=thumb.size,
            )

        return await recipe_service.create_recipe(
            db=db,
            owner_id=current_user.id,
            payload=payload,
            image=image,
        )
    finally:
        if thumb is not None:
            await thumb.close()


@router.post(
    "/favorites",
    response_model=FavoriteActionResponse,
    responses={
        **AUTH_ERRORS,
        404: {"description": "Recipe not found", "model": ErrorResponse},
        409: {"description": "Recipe already in favorites", "model": ErrorResponse},
    },
    summary="Add a recipe to favorites",
)
async def add_to_favorites(
    current_user: User = Depends(get_current_user),
    body: FavoriteRequest = Depends(validate_body(FavoriteRequest)),
    db: AsyncSession = Depends(get_db_session),
) -> FavoriteActionResponse:
    return await favorite_service.add_to_favorites(db, current_user.id, body.recipe_id)


@router.delete(
    "/favorites",
    response_model=FavoriteActionResponse,
    responses={
        **AUTH_ERRORS,
        404: {"description": "Recipe not found", "model": ErrorResponse},
        409: {"description": "Recipe not in favorites", "model": ErrorResponse},
    },
    summary="Remove a recipe from favorites",
)
async def remove_from_favorites(
    current_user: User = Depends(get_current_user),
    body: FavoriteRequest = Depends(validate_body(FavoriteRequest)),
    db: AsyncSession = Depends(get_db_session),
) -> FavoriteActionResponse:
    return await favorite_service.remove_from_favorites(db, current_user.id, body.recipe_id)


@router.get(
    "/favorites",
    response_model=FavoritesPageResponse,
    responses=AUTH_ERRORS,
    summary="List the current user's favorite recipes",
    description="Paginated with `page` (default 1) and `limit` (default 10), newest favorite first.",
)
async def list_favorites(
    current_user: User = Depends(get_current_user),
    pagination: PaginationParams = Depends(validate_query(PaginationParams)),
    db: AsyncSession = Depends(get_db_session),
) -> FavoritesPageResponse:
    return await favorite_service.list_favorites(
        db,
        current_user.id,
        page=pagination.page,
        limit=pagination.limit,
    )


@router.get(
    "",
    response_model=RecipeListResponse,
    responses={400: {"description": "Invalid filter", "model": ErrorResponse}},
    summary="List recipes",
    description="All recipes, newest first. Optional exact filters: category, area, ingredient.",
)
async def list_recipes(
    response: Response,
    filters: RecipeFilterParams = Depends(validate_query(RecipeFilterParams)),
    db: AsyncSession = Depends(get_db_session),
) -> RecipeListResponse:
    recipes = await recipe_service.list_recipes(
        db,
        category=filters.category,
        area=filters.area,
        ingredient=filters.ingredient,
    )
    response.headers["X-Total-Count"] = str(len(recipes))
    return RecipeListResponse(recipes=recipes, total=len(recipes))


@router.get(
    "/popular",
    response_model=PopularRecipeListResponse,
    responses={400: {"description": "Invalid limit", "model": ErrorResponse}},
    summary="List recipes by favorite count",
)
async def list_popular_recipes(
    params: PopularParams = Depends(validate_query(PopularParams)),
    db: AsyncSession = Depends(get_db_session),
) -> PopularRecipeListResponse:
    recipes = await recipe_service.list_popular_recipes(db, limit=params.limit)
    return PopularRecipeListResponse(recipes=recipes)


@router.get(
    "/own",
    response_model=RecipeListResponse,
    responses=AUTH_ERRORS,
    summary="List recipes created by the current user",
)
async def list_own_recipes(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> RecipeListResponse:
    recipes = await recipe_service.list_own_recipes(db, current_user.id)
    return RecipeListResponse(recipes=recipes, total=len(recipes))


@router.get(
    "/{recipe_id}",
    response_model=RecipeResponse,
    responses={404: {"description": "Recipe not found", "model": ErrorResponse}},
    summary="Get a recipe by ID",
)
async def get_recipe(
    recipe_id: int = Path(ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
) -> RecipeResponse:
    return await recipe_service.get_recipe(db, recipe_id)


@router.delete(
    "/{recipe_id}",
    response_model=RecipeResponse,
    responses={
        **AUTH_ERRORS,
        403: {"description": "Not the owner of this recipe", "model": ErrorResponse},
        404: {"description": "Recipe not found", "model": ErrorResponse},
    },
    summary="Delete a recipe",
    description="Only the owner may delete a recipe. Its favorites are removed with it.",
)
async def delete_recipe(
    background_tasks: BackgroundTasks,
    recipe_id: int = Path(ge=1, le=MAX_ID),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> RecipeResponse:
    deleted = await recipe_service.delete_recipe(db, current_user.id, recipe_id)

    # After the response, so the file only goes once the row is committed
    image_path = file_service.path_from_public_url(deleted.thumb)
    if image_path:
        background_tasks.add_task(file_service.cleanup_file, image_path)

    return deleted
