"""User model."""

from sqlalchemy import Column, String

from recipes_api.database import Base
from recipes_api.models.mixins import IdentifierMixin, TimestampMixin


class User(Base, IdentifierMixin, TimestampMixin):
    """User model for authentication and ownership."""

    __tablename__ = "users"

    # Unique constraint is what actually guarantees one account per email
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
