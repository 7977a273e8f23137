"""
Foodies Backend — User Schemas
================================

What:  Response models for /api/users.
Why:   The ORM User row carries password hash and tokens; these models
       decide which columns may leave the API.

Two shapes:
    - UserPublic: what anyone may see about any user (follower lists)
    - CurrentUserResponse: the authenticated user's own profile, with email
      and relationship counts
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class UserPublic(BaseModel):
    id: int
    name: Optional[str] = None
    avatar: Optional[str] = None

    model_config = {"from_attributes": True}


class CurrentUserResponse(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    avatar: Optional[str] = None
    verify: bool
    followers_count: int = Field(description="Users following this user")
    following_count: int = Field(description="Users this user follows")
    recipes_count: int = Field(description="Recipes owned by this user")
    favorites_count: int = Field(description="Recipes this user saved")


class UserPageResponse(BaseModel):
    """One page of a follower or following list, newest edge first."""
    page: int
    limit: int
    total: int
    users: List[UserPublic]


class FollowActionResponse(BaseModel):
    message: str
    user_id: int
