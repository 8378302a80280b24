"""SQLAlchemy models."""

from recipes_api.models.recipe import Recipe
from recipes_api.models.user import User

__all__ = [
    "User",
    "Recipe",
]
