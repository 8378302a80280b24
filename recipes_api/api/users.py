"""User sign-up, login and profile endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from recipes_api.api.dependencies import (
    TOKEN_COOKIE,
    TOKEN_HEADER,
    get_identity_service,
    get_token_issuer,
    require_owner,
)
from recipes_api.config import Settings, get_settings
from recipes_api.exceptions import SigningError
from recipes_api.schemas.auth import Credentials, UserResponse
from recipes_api.schemas.error import ErrorResponse
from recipes_api.services.auth import TokenIssuer
from recipes_api.services.identity_service import Identity, IdentityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

PROFILE_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def token_response(
    identity: Identity,
    action: str,
    issuer: TokenIssuer,
    settings: Settings,
    status_code: int,
) -> PlainTextResponse:
    """Plain-text user id response carrying a fresh token in header and cookie.

    If signing fails the account operation has still happened, so the error
    says so and carries the user id.
    """
    try:
        token = issuer.issue(identity.id, identity.email)
    except SigningError as e:
        logger.warning(f"{action} for user {identity.id} completed without a token")
        raise SigningError(
            f"{action} succeeded, but a session token could not be issued",
            {"user_id": identity.id},
        ) from e

    response = PlainTextResponse(identity.id, status_code=status_code)
    response.headers[TOKEN_HEADER] = token
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=settings.jwt_expiration_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return response


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_class=PlainTextResponse,
    responses=ERROR_RESPONSES,
)
async def signup(
    credentials: Credentials,
    identity_service: Annotated[IdentityService, Depends(get_identity_service)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Create an account and return its id, with a session token."""
    identity = identity_service.create_account(credentials.email, credentials.password)
    return token_response(identity, "Sign-up", issuer, settings, status.HTTP_201_CREATED)


@router.post("/login", response_class=PlainTextResponse, responses=ERROR_RESPONSES)
async def login(
    credentials: Credentials,
    identity_service: Annotated[IdentityService, Depends(get_identity_service)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Login with email and password."""
    identity = identity_service.authenticate(credentials.email, credentials.password)
    return token_response(identity, "Login", issuer, settings, status.HTTP_200_OK)


@router.get("/{user_id}", response_model=UserResponse, responses=PROFILE_RESPONSES)
async def get_profile(
    subject_id: Annotated[str, Depends(require_owner)],
    identity_service: Annotated[IdentityService, Depends(get_identity_service)],
):
    """Get the authenticated user's profile."""
    return identity_service.get_profile(subject_id)
