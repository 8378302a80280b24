"""
Application exception hierarchy.

Services raise these; a single handler registered in main.py turns them into
structured JSON error responses using each class's status code.
"""

from typing import Any

from fastapi import status


class RecipesApiError(Exception):
    """Base exception for all application errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "InternalError"
    default_message: str = "An unexpected error occurred"
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# --- Input ---


class MissingFieldsError(RecipesApiError):
    """Required request fields were absent or empty."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "MissingFields"
    default_message = "Email and password are required"


class InvalidEmailError(RecipesApiError):
    """Email address is not well formed."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "InvalidEmail"
    default_message = "Invalid email address"


class InvalidIdError(RecipesApiError):
    """Identifier is not well formed for the store."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "InvalidId"
    default_message = "Invalid id"


# --- Identity ---


class EmailInUseError(RecipesApiError):
    status_code = status.HTTP_409_CONFLICT
    code = "EmailInUse"
    default_message = "Email already registered"


class AuthFailedError(RecipesApiError):
    """Login failed. Deliberately does not say whether the email exists."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AuthFailed"
    default_message = "Incorrect email or password"
    headers = {"WWW-Authenticate": "Token"}


# --- Authorization gate ---


class UnauthenticatedError(RecipesApiError):
    """No token, or a token that is malformed or fails signature checks."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "Unauthenticated"
    default_message = "Invalid authentication credentials"
    headers = {"WWW-Authenticate": "Token"}


class TokenExpiredError(RecipesApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "TokenExpired"
    default_message = "Authentication token has expired"
    headers = {"WWW-Authenticate": "Token"}


class ForbiddenError(RecipesApiError):
    """Valid token, but for a different owner than the one addressed."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "Forbidden"
    default_message = "Token does not grant access to this user's resources"


class SigningError(RecipesApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "SigningError"
    default_message = "Unable to issue authentication token"


# --- Resources ---


class NotFoundError(RecipesApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NotFound"
    default_message = "Resource not found"

    def __init__(self, resource: str = "Resource", resource_id: str | None = None):
        details = {"resource": resource.lower()}
        if resource_id:
            details["id"] = resource_id
        super().__init__(f"{resource} not found", details)


class StorageError(RecipesApiError):
    """Persistence or filesystem failure. Message is generic; detail goes to the log."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "StorageError"
    default_message = "A storage error occurred. Please try again later."


class UploadError(RecipesApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "UploadError"
    default_message = "Unable to read uploaded file"


class UploadTooLargeError(UploadError):
    status_code = status.HTTP_413_CONTENT_TOO_LARGE

    def __init__(self, max_bytes: int):
        super().__init__(
            f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.",
            {"max_bytes": max_bytes},
        )
