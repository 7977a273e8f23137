"""
Foodies Backend — Recipe SQLAlchemy Models
============================================

What:  ORM models for `recipes` and `recipe_ingredients`.
Why:   A recipe is owned content; its ingredient list is ordered and must
       come back in the order it was submitted.
How:   Ingredients live in their own table with a `position` column instead
       of a JSON blob, so filtering recipes by ingredient is a plain
       subquery that works the same on PostgreSQL and SQLite.

Query Patterns:
    - Newest recipes:     ORDER BY created_at DESC → idx_recipes_created_at
    - Own recipes:        WHERE owner_id = :uid   → idx_recipes_owner_id
    - By category / area: WHERE category = :c     → idx_recipes_category
    - By ingredient:      WHERE id IN (SELECT recipe_id FROM recipe_ingredients
                                       WHERE ingredient_id = :i)
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from foodies.database import Base


class Recipe(Base):
    """
    A recipe published by a user.

    Lifecycle:
        1. Created by POST /api/recipes (owner = authenticated user)
        2. Read by anyone through the list/detail endpoints
        3. Deleted only by its owner; favorites and ingredient rows go with it

    Ownership is enforced by RecipeService.delete_recipe, not by the schema.
    """

    __tablename__ = "recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    # Category and area are free-form names, matching Category.name by
    # convention; filtering is exact match.
    category: Mapped[str] = mapped_column(String(100), nullable=False)

    area: Mapped[str] = mapped_column(String(100), nullable=False)

    # Minutes
    time: Mapped[int] = mapped_column(Integer, nullable=False)

    instructions: Mapped[str] = mapped_column(Text, nullable=False)

    # Public URL of the stored thumbnail (/api/files/recipes/...), NULL when
    # the recipe was created without an image.
    thumb: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_recipes_created_at", "created_at"),
        Index("idx_recipes_owner_id", "owner_id"),
        Index("idx_recipes_category", "category"),
        Index("idx_recipes_area", "area"),
    )

    def __repr__(self) -> str:
        return f"<Recipe(id={self.id}, title='{self.title}', owner_id={self.owner_id})>"


class RecipeIngredient(Base):
    """One line of a recipe's ingredient list: which ingredient, how much."""

    __tablename__ = "recipe_ingredients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    recipe_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("recipes.id", ondelete="CASCADE"),
        nullable=False,
    )

    # 0-based index into the submitted list
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    # Ingredient ids come from the ingredients catalogue (24-char hex ids in
    # the shared dataset), so this is a string, not a foreign key.
    ingredient_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    quantity: Mapped[str] = mapped_column(String(100), nullable=False)

    __table_args__ = (
        UniqueConstraint("recipe_id", "position", name="uq_recipe_ingredients_position"),
    )

    def __repr__(self) -> str:
        return (
            f"<RecipeIngredient(recipe_id={self.recipe_id}, position={self.position}, "
            f"ingredient_id='{self.ingredient_id}')>"
        )
