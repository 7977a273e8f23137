"""
Foodies Backend — User Service (Profile and Follows)
======================================================

What:  Current-user profile plus the follow / unfollow / list operations.
Why:   Follows are a directed self-relation over users; the rules the table
       cannot express (no self-follow, no duplicate edge) live here.
How:   Every lookup is a query against `user_followers`:
           followers of X → rows WHERE following_id = X, join users ON follower_id
           X is following → rows WHERE follower_id = X, join users ON following_id

Semantics (mirrors the favorites policy):
    follow    target missing → 404 | self → 400 | edge exists → 409
    unfollow  target missing → 404 | edge absent → 409
"""

import logging
from typing import Tuple

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from foodies.exceptions import ConflictError, NotFoundError, ValidationError
from foodies.models.favorite import Favorite
from foodies.models.recipe import Recipe
from foodies.models.user import User, user_followers
from foodies.schemas.common import page_offset
from foodies.schemas.user import (
    CurrentUserResponse,
    FollowActionResponse,
    UserPageResponse,
    UserPublic,
)

logger = logging.getLogger(__name__)


class UserService:

    async def _ensure_user_exists(self, db: AsyncSession, user_id: int) -> None:
        result = await db.execute(select(User.id).where(User.id == user_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))

    async def _count(self, db: AsyncSession, query) -> int:
        result = await db.execute(query)
        return result.scalar() or 0

    async def get_profile(self, db: AsyncSession, user: User) -> CurrentUserResponse:
        """The authenticated user's own profile with relationship counts."""
        followers = await self._count(
            db, select(func.count()).select_from(user_followers).where(user_followers.c.following_id == user.id)
        )
        following = await self._count(
            db, select(func.count()).select_from(user_followers).where(user_followers.c.follower_id == user.id)
        )
        recipes = await self._count(db, select(func.count(Recipe.id)).where(Recipe.owner_id == user.id))
        favorites = await self._count(db, select(func.count(Favorite.id)).where(Favorite.user_id == user.id))

        return CurrentUserResponse(
            id=user.id,
            name=user.name,
            email=user.email,
            avatar=user.avatar,
            verify=user.verify,
            followers_count=followers,
            following_count=following,
            recipes_count=recipes,
            favorites_count=favorites,
        )

    async def follow(self, db: AsyncSession, follower_id: int, target_id: int) -> FollowActionResponse:
        """
        Raises:
            NotFoundError: target user does not exist (→ 404)
            ValidationError: follower_id == target_id (→ 400)
            ConflictError: already following, including a lost race (→ 409)
        """
        await self._ensure_user_exists(db, target_id)

        if follower_id == target_id:
            raise ValidationError(message="You cannot follow yourself", field="user_id")

        if await self._edge_exists(db, follower_id, target_id):
            raise ConflictError(
                message="You are already following this user",
                context={"user_id": target_id},
            )

        try:
            await db.execute(
                insert(user_followers).values(follower_id=follower_id, following_id=target_id)
            )
        except IntegrityError:
            raise ConflictError(
                message="You are already following this user",
                context={"user_id": target_id},
            )

        logger.info("User %s now follows user %s", follower_id, target_id)
        return FollowActionResponse(message="User followed", user_id=target_id)

    async def unfollow(self, db: AsyncSession, follower_id: int, target_id: int) -> FollowActionResponse:
        """
        Raises:
            NotFoundError: target user does not exist (→ 404)
            ConflictError: not following this user (→ 409)
        """
        await self._ensure_user_exists(db, target_id)

        result = await db.execute(
            delete(user_followers).where(
                user_followers.c.follower_id == follower_id,
                user_followers.c.following_id == target_id,
            )
        )
        if result.rowcount == 0:
            raise ConflictError(
                message="You are not following this user",
                context={"user_id": target_id},
            )

        logger.info("User %s unfollowed user %s", follower_id, target_id)
        return FollowActionResponse(message="User unfollowed", user_id=target_id)

    async def _edge_exists(self, db: AsyncSession, follower_id: int, following_id: int) -> bool:
        result = await db.execute(
            select(user_followers.c.follower_id).where(
                user_followers.c.follower_id == follower_id,
                user_followers.c.following_id == following_id,
            )
        )
        return result.first() is not None

    async def list_followers(self, db: AsyncSession, user_id: int, page: int = 1, limit: int = 10) -> UserPageResponse:
        """Users who follow `user_id`, most recent follow first."""
        return await self._list_edges(db, user_id, page, limit, direction="followers")

    async def list_following(self, db: AsyncSession, user_id: int, page: int = 1, limit: int = 10) -> UserPageResponse:
        """Users that `user_id` follows, most recent follow first."""
        return await self._list_edges(db, user_id, page, limit, direction="following")

    async def _list_edges(
        self,
        db: AsyncSession,
        user_id: int,
        page: int,
        limit: int,
        direction: str,
    ) -> UserPageResponse:
        await self._ensure_user_exists(db, user_id)

        anchor, other = self._edge_columns(direction)
        query = (
            select(User)
            .join(user_followers, other == User.id)
            .where(anchor == user_id)
            .order_by(user_followers.c.created_at.desc(), User.id.desc())
            .limit(limit)
            .offset(page_offset(page, limit))
        )
        result = await db.execute(query)
        users = [UserPublic.model_validate(row) for row in result.scalars().all()]

        total = await self._count(
            db, select(func.count()).select_from(user_followers).where(anchor == user_id)
        )
        return UserPageResponse(page=page, limit=limit, total=total, users=users)

    @staticmethod
    def _edge_columns(direction: str) -> Tuple:
        """(column matching the anchor user, column pointing at the listed users)."""
        if direction == "followers":
            return user_followers.c.following_id, user_followers.c.follower_id
        return user_followers.c.follower_id, user_followers.c.following_id


user_service = UserService()
