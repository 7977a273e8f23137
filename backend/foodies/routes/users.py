"""
Foodies Backend — User Route Handlers
=======================================

What:  Current-user profile and the follows sub-resources.
How:   Follow/unfollow act on behalf of the authenticated user; follower and
       following lists are public and paginated like favorites.

Routes:
    GET    /api/users/current
    POST   /api/users/{user_id}/follow
    DELETE /api/users/{user_id}/follow
    GET    /api/users/{user_id}/followers?page&limit
    GET    /api/users/{user_id}/following?page&limit
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from foodies.database import get_db_session
from foodies.dependencies import get_current_user
from foodies.models.user import User
from foodies.schemas.common import MAX_ID, ErrorResponse, PaginationParams
from foodies.schemas.user import CurrentUserResponse, FollowActionResponse, UserPageResponse
from foodies.services.user_service import user_service
from foodies.validation import validate_query

router = APIRouter(prefix="/api/users", tags=["Users"])

FOLLOW_ERRORS = {
    400: {"description": "Cannot follow yourself", "model": ErrorResponse},
    401: {"description": "Missing or invalid access token", "model": ErrorResponse},
    404: {"description": "User not found", "model": ErrorResponse},
}


@router.get(
    "/current",
    response_model=CurrentUserResponse,
    responses={401: {"description": "Missing or invalid access token", "model": ErrorResponse}},
    summary="Profile of the authenticated user",
)
async def get_current_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CurrentUserResponse:
    return await user_service.get_profile(db, current_user)


@router.post(
    "/{user_id}/follow",
    response_model=FollowActionResponse,
    responses={**FOLLOW_ERRORS, 409: {"description": "Already following", "model": ErrorResponse}},
    summary="Follow a user",
)
async def follow_user(
    user_id: int = Path(ge=1, le=MAX_ID),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FollowActionResponse:
    return await user_service.follow(db, current_user.id, user_id)


@router.delete(
    "/{user_id}/follow",
    response_model=FollowActionResponse,
    responses={**FOLLOW_ERRORS, 409: {"description": "Not following", "model": ErrorResponse}},
    summary="Unfollow a user",
)
async def unfollow_user(
    user_id: int = Path(ge=1, le=MAX_ID),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FollowActionResponse:
    return await user_service.unfollow(db, current_user.id, user_id)


@router.get(
    "/{user_id}/followers",
    response_model=UserPageResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Users following this user",
)
async def list_followers(
    user_id: int = Path(ge=1, le=MAX_ID),
    pagination: PaginationParams = Depends(validate_query(PaginationParams)),
    db: AsyncSession = Depends(get_db_session),
) -> UserPageResponse:
    return await user_service.list_followers(db, user_id, pagination.page, pagination.limit)


@router.get(
    "/{user_id}/following",
    response_model=UserPageResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Users this user follows",
)
async def list_following(
    user_id: int = Path(ge=1, le=MAX_ID),
    pagination: PaginationParams = Depends(validate_query(PaginationParams)),
    db: AsyncSession = Depends(get_db_session),
) -> UserPageResponse:
    return await user_service.list_following(db, user_id, pagination.page, pagination.limit)
