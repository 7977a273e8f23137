"""
Foodies Backend — Favorite SQLAlchemy Model
=============================================

What:  Join entity between users and the recipes they saved.
Why:   A user favorites a recipe at most once; the unique constraint is the
       final arbiter when two add requests race.
How:   Surrogate integer key (gives a stable insertion order for tie breaks)
       plus UNIQUE(user_id, recipe_id).
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from foodies.database import Base


class Favorite(Base):
    __tablename__ = "favorites"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    recipe_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("recipes.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Favorites are listed newest first
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", name="uq_favorites_user_recipe"),
        Index("idx_favorites_recipe_id", "recipe_id"),
    )

    def __repr__(self) -> str:
        return f"<Favorite(user_id={self.user_id}, recipe_id={self.recipe_id})>"
