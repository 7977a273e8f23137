"""
Foodies Backend — Category Schemas
====================================

What:  Request/response models for /api/categories.
Why:   Category names are shown as filter chips; empty strings and broken
       thumbnail links would render as blank UI, so both are rejected here.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, HttpUrl, field_validator


class CategoryCreate(BaseModel):
    """
    Constraints:
        name:        required, non-empty after trimming
        description: optional; if present must be non-empty
        thumb:       optional; if present must be an http(s) URL
    """
    name: str = Field(min_length=1, max_length=100, description="Category name")
    description: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    thumb: Optional[HttpUrl] = Field(default=None, description="Thumbnail image URL")

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    thumb: Optional[str] = None

    model_config = {"from_attributes": True}


class CategoryListResponse(BaseModel):
    categories: List[CategoryResponse]
