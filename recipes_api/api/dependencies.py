"""FastAPI dependencies for authorization, settings and services."""

from typing import Annotated

from fastapi import Cookie, Depends, Header, Path
from sqlalchemy.orm import Session

from recipes_api.config import Settings, get_settings
from recipes_api.database import get_db
from recipes_api.services.auth import TokenIssuer, TokenVerifier
from recipes_api.services.identity_service import IdentityService
from recipes_api.services.image_store import ImageStore
from recipes_api.services.recipe_service import RecipeService

TOKEN_HEADER = "Token"
TOKEN_COOKIE = "recipes-api-token"  # noqa: S105


def get_token_issuer(settings: Annotated[Settings, Depends(get_settings)]) -> TokenIssuer:
    """Get token issuer bound to the current settings."""
    return TokenIssuer(settings)


def get_token_verifier(settings: Annotated[Settings, Depends(get_settings)]) -> TokenVerifier:
    """Get token verifier bound to the current settings."""
    return TokenVerifier(settings)


def get_identity_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> IdentityService:
    """Get identity service with dependencies."""
    return IdentityService(db, settings)


def get_recipe_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RecipeService:
    """Get recipe service with dependencies."""
    return RecipeService(db, ImageStore(settings))


def require_owner(
    user_id: Annotated[str, Path()],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
    header_token: Annotated[str | None, Header(alias=TOKEN_HEADER)] = None,
    cookie_token: Annotated[str | None, Cookie(alias=TOKEN_COOKIE)] = None,
) -> str:
    """Authorize the request for the owner named in the path.

    The token comes from the Token header, falling back to the session cookie.
    Returns the authenticated subject id.
    """
    return verifier.authorize(header_token or cookie_token, user_id)
