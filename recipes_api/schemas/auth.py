"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Sign-up or login request.

    Fields are optional here so that absent or empty values are reported by
    the identity service as MissingFields rather than as a schema error.
    """

    email: str | None = Field(None, max_length=255)
    password: str | None = Field(None, max_length=128)


class UserResponse(BaseModel):
    """User information response. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
