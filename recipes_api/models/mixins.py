"""Mixins and identifier helpers for SQLAlchemy models."""

import uuid

from sqlalchemy import Column, DateTime, String, func

from recipes_api.exceptions import InvalidIdError


def new_id() -> str:
    """Generate an opaque identifier for a new record."""
    return uuid.uuid4().hex


def parse_id(value: str | None) -> str:
    """Normalise a client-supplied identifier.

    Accepts any textual UUID form and returns its 32-character hex form.
    Raises InvalidIdError for anything else.
    """
    if not value:
        raise InvalidIdError()
    try:
        return uuid.UUID(value).hex
    except (ValueError, AttributeError, TypeError):
        raise InvalidIdError(details={"id": str(value)[:64]}) from None


class IdentifierMixin:
    """Mixin adding a server-generated opaque primary key."""

    id = Column(String(32), primary_key=True, default=new_id)


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
