"""Recipe API endpoints, all scoped to the owner named in the path."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Response, UploadFile, status

from recipes_api.api.dependencies import get_recipe_service, require_owner
from recipes_api.exceptions import UploadError
from recipes_api.schemas.error import ErrorResponse
from recipes_api.schemas.recipe import RecipePayload, RecipeResponse
from recipes_api.services.recipe_service import RecipeService

router = APIRouter(
    prefix="/users/{user_id}/recipes",
    tags=["recipes"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.get("", response_model=list[RecipeResponse])
async def list_recipes(
    owner_id: Annotated[str, Depends(require_owner)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """List all recipes for the user."""
    return service.list_by_owner(owner_id)


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    recipe_data: RecipePayload,
    owner_id: Annotated[str, Depends(require_owner)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Create a new recipe."""
    return service.create(owner_id, recipe_data)


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: str,
    owner_id: Annotated[str, Depends(require_owner)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Get a recipe."""
    return service.get(owner_id, recipe_id)


@router.put("/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(
    recipe_id: str,
    recipe_data: RecipePayload,
    owner_id: Annotated[str, Depends(require_owner)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Replace a recipe. Fields left out of the body are cleared."""
    return service.update(owner_id, recipe_id, recipe_data)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: str,
    owner_id: Annotated[str, Depends(require_owner)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Delete a recipe."""
    service.delete(owner_id, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{recipe_id}/images",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={413: {"model": ErrorResponse}},
)
async def upload_recipe_image(
    recipe_id: str,
    owner_id: Annotated[str, Depends(require_owner)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
    file: Annotated[UploadFile | None, File(description="Recipe image")] = None,
):
    """Attach an image to a recipe (multipart form field "file")."""
    if file is None:
        raise UploadError("Missing form file field \"file\"")
    service.attach_image(owner_id, recipe_id, file.file, file.filename)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
