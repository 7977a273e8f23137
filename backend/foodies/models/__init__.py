"""
Foodies Backend — ORM Models Package

Importing this package registers every table on Base.metadata, which Alembic
autogenerate and the test suite's create_all() rely on.
"""

from foodies.models.category import Category
from foodies.models.favorite import Favorite
from foodies.models.recipe import Recipe, RecipeIngredient
from foodies.models.user import User, user_followers

__all__ = [
    "Category",
    "Favorite",
    "Recipe",
    "RecipeIngredient",
    "User",
    "user_followers",
]
