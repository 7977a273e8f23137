"""
Foodies Backend — Category Route Handlers
===========================================

What:  GET /api/categories (public) and POST /api/categories (authenticated).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodies.database import get_db_session
from foodies.dependencies import get_current_user
from foodies.models.user import User
from foodies.schemas.category import CategoryCreate, CategoryListResponse, CategoryResponse
from foodies.schemas.common import ErrorResponse
from foodies.services.category_service import category_service
from foodies.validation import validate_body

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get(
    "",
    response_model=CategoryListResponse,
    summary="List all categories",
)
async def list_categories(
    db: AsyncSession = Depends(get_db_session),
) -> CategoryListResponse:
    return CategoryListResponse(categories=await category_service.list_categories(db))


@router.post(
    "",
    status_code=201,
    response_model=CategoryResponse,
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        401: {"description": "Missing or invalid access token", "model": ErrorResponse},
        409: {"description": "Category already exists", "model": ErrorResponse},
    },
    summary="Create a category",
)
async def create_category(
    current_user: User = Depends(get_current_user),
    payload: CategoryCreate = Depends(validate_body(CategoryCreate)),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResponse:
    return await category_service.create_category(db, payload)
