"""
Foodies Backend — Recipe Request/Response Schemas
===================================================

What:  Pydantic models for the /api/recipes contract.
Why:   Request schemas define what "valid input" means for the validation
       layer; response schemas control exactly which columns leave the API.
How:   RecipeCreate is fed by validate_body() from either JSON or multipart
       form fields. Responses are built from ORM rows with from_attributes.

Multipart note:
    POST /api/recipes is multipart/form-data because it carries the image.
    Form fields are strings, so `ingredients` arrives JSON-encoded and `time`
    arrives as "30"; the validators below accept both shapes.
"""

import json
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from foodies.config import settings
from foodies.schemas.common import MAX_ID


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class IngredientItem(BaseModel):
    """One ingredient line: catalogue id plus a free-text quantity ("200g")."""
    ingredient_id: str = Field(
        min_length=1,
        max_length=64,
        validation_alias=AliasChoices("ingredient_id", "ingredientId"),
        description="Ingredient catalogue ID",
    )
    quantity: str = Field(min_length=1, max_length=100, description="Quantity, e.g. '200g'")

    model_config = {"from_attributes": True, "populate_by_name": True}


class RecipeCreate(BaseModel):
    """
    What:  Payload for creating a recipe. Every field is required.

    Constraints:
        title:        1-200 chars
        description:  1-2000 chars
        category:     1-100 chars (a Category name)
        area:         1-100 chars (cuisine, e.g. "Italian")
        time:         cooking time in minutes, 1-1440
        ingredients:  at least one IngredientItem, order preserved
        instructions: 1-10000 chars
    """
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=2000)
    category: str = Field(min_length=1, max_length=100)
    area: str = Field(min_length=1, max_length=100)
    time: int = Field(ge=1, le=1440, description="Cooking time in minutes")
    ingredients: List[IngredientItem] = Field(min_length=1)
    instructions: str = Field(min_length=1, max_length=10000)

    @field_validator("title", "description", "category", "area", "instructions", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Whitespace-only strings count as empty."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("ingredients", mode="before")
    @classmethod
    def decode_ingredients(cls, v: Any) -> Any:
        """Accepts the JSON-encoded string sent in multipart forms."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                raise ValueError("ingredients must be a JSON array of {ingredient_id, quantity}")
        return v


class FavoriteRequest(BaseModel):
    """Body of POST/DELETE /api/recipes/favorites."""
    recipe_id: int = Field(
        ge=1,
        le=MAX_ID,
        validation_alias=AliasChoices("recipe_id", "recipeId"),
        description="ID of the recipe to add or remove",
    )


class RecipeFilterParams(BaseModel):
    """Optional exact-match filters for GET /api/recipes."""
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    area: Optional[str] = Field(default=None, min_length=1, max_length=100)
    ingredient: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=64,
        description="Only recipes that use this ingredient ID",
    )


class PopularParams(BaseModel):
    """Optional cap on the number of popular recipes returned."""
    limit: Optional[int] = Field(default=None, ge=1, le=settings.max_page_size)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class RecipeResponse(BaseModel):
    """
    What:  Full representation of a recipe.
    Who:   Returned by create, detail, list, own and favorites endpoints.
    """
    id: int
    title: str
    description: str
    category: str
    area: str
    time: int
    ingredients: List[IngredientItem]
    instructions: str
    thumb: Optional[str] = Field(default=None, description="URL of the recipe image")
    owner_id: int
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Timestamps are written in UTC; SQLite hands them back naive."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class PopularRecipeResponse(RecipeResponse):
    favorites_count: int = Field(description="How many users saved this recipe")


class RecipeListResponse(BaseModel):
    recipes: List[RecipeResponse]
    total: int = Field(description="Number of recipes returned")


class PopularRecipeListResponse(BaseModel):
    recipes: List[PopularRecipeResponse]


class FavoritesPageResponse(BaseModel):
    """
    What:  One page of the current user's favorite recipes.

    Pagination strategy:
        Offset-based page/limit. Rows are ordered by favorited-at DESC (then
        favorite id DESC) so consecutive pages never overlap while nothing
        is added or removed in between. A page past the end is empty.
    """
    page: int
    limit: int
    total: int = Field(description="Total number of favorites of this user")
    recipes: List[RecipeResponse]


class FavoriteActionResponse(BaseModel):
    message: str
    recipe_id: int
