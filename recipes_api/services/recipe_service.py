"""Recipe service: owner-scoped CRUD and image attachment."""

import logging
from typing import BinaryIO

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recipes_api.exceptions import NotFoundError, StorageError
from recipes_api.models.mixins import parse_id
from recipes_api.models.recipe import Recipe
from recipes_api.schemas.recipe import RecipePayload
from recipes_api.services.image_store import ImageStore

logger = logging.getLogger(__name__)


class RecipeService:
    """Service for recipe operations.

    Every method takes the owner id produced by the authorization gate. The
    owner is always stamped from that value, never from the payload, and
    single-recipe lookups only match recipes belonging to that owner.
    """

    def __init__(self, db: Session, image_store: ImageStore | None = None):
        self.db = db
        self.image_store = image_store

    def list_by_owner(self, owner_id: str) -> list[Recipe]:
        """List all recipes for an owner."""
        try:
            return (
                self.db.query(Recipe)
                .filter(Recipe.owner_id == owner_id)
                .order_by(Recipe.created_at, Recipe.name)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to list recipes for user {owner_id}: {e}")
            raise StorageError() from e

    def get(self, owner_id: str, recipe_id: str) -> Recipe:
        """Get a recipe that belongs to the owner.

        Recipes owned by someone else are reported as not found.
        """
        recipe_id = parse_id(recipe_id)
        try:
            recipe = (
                self.db.query(Recipe)
                .filter(Recipe.id == recipe_id, Recipe.owner_id == owner_id)
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load recipe {recipe_id}: {e}")
            raise StorageError() from e
        if recipe is None:
            raise NotFoundError("Recipe", recipe_id)
        return recipe

    def create(self, owner_id: str, payload: RecipePayload) -> Recipe:
        """Create a new recipe owned by owner_id."""
        recipe = Recipe()
        self._replace_fields(recipe, owner_id, payload)
        self.db.add(recipe)
        self._commit(f"create recipe for user {owner_id}")
        self.db.refresh(recipe)
        return recipe

    def update(self, owner_id: str, recipe_id: str, payload: RecipePayload) -> Recipe:
        """Replace a recipe with the payload.

        This is a full replace, not a merge: fields omitted from the payload
        are cleared.
        """
        recipe = self.get(owner_id, recipe_id)
        self._replace_fields(recipe, owner_id, payload)
        self._commit(f"update recipe {recipe.id}")
        self.db.refresh(recipe)
        return recipe

    def delete(self, owner_id: str, recipe_id: str) -> None:
        """Delete a recipe."""
        recipe = self.get(owner_id, recipe_id)
        self.db.delete(recipe)
        self._commit(f"delete recipe {recipe.id}")

    def attach_image(
        self,
        owner_id: str,
        recipe_id: str,
        stream: BinaryIO,
        filename: str | None,
    ) -> Recipe:
        """Store an uploaded image and point the recipe at it.

        Concurrent attaches to the same recipe are not serialized; the last
        commit wins.
        """
        if self.image_store is None:
            raise RuntimeError("RecipeService needs an ImageStore to attach images")

        recipe = self.get(owner_id, recipe_id)
        stored_name = self.image_store.save(stream, filename)
        recipe.image = stored_name
        try:
            self._commit(f"attach image to recipe {recipe.id}")
        except StorageError:
            self.image_store.delete(stored_name)
            raise
        self.db.refresh(recipe)
        return recipe

    def _replace_fields(self, recipe: Recipe, owner_id: str, payload: RecipePayload) -> None:
        recipe.owner_id = owner_id
        recipe.name = payload.name
        recipe.price = payload.price
        recipe.description = payload.description
        recipe.image = payload.image
        recipe.yield_ = payload.yield_
        recipe.instructions = list(payload.instructions)
        recipe.ingredients = [ingredient.model_dump() for ingredient in payload.ingredients]

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise StorageError() from e
