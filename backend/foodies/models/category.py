"""
Foodies Backend — Category SQLAlchemy Model
=============================================

What:  Recipe categories shown on the home page (Beef, Dessert, Vegan, ...).
Why:   Recipes reference categories by name; the catalogue itself carries the
       description and thumbnail the frontend displays.
"""

from typing import Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from foodies.database import Base


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    thumb: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
