"""Error response schema."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Structured error body returned for every application error."""

    error: str
    message: str
    details: dict[str, Any] = {}
