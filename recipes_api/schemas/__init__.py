"""Pydantic schemas for API requests and responses."""

from recipes_api.schemas.auth import Credentials, UserResponse
from recipes_api.schemas.error import ErrorResponse
from recipes_api.schemas.recipe import Ingredient, RecipePayload, RecipeResponse

__all__ = [
    "Credentials",
    "UserResponse",
    "ErrorResponse",
    "Ingredient",
    "RecipePayload",
    "RecipeResponse",
]
