"""Recipe model."""

from sqlalchemy import JSON, Column, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from recipes_api.database import Base
from recipes_api.models.mixins import IdentifierMixin, TimestampMixin


class Recipe(Base, IdentifierMixin, TimestampMixin):
    """Recipe document owned by exactly one user.

    Ingredients are embedded values with no identity of their own, so they are
    stored as a JSON list on the recipe rather than in a separate table.
    """

    __tablename__ = "recipes"

    owner_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    price = Column(Float, nullable=True)
    description = Column(Text, nullable=True)
    image = Column(String(255), nullable=True)
    yield_ = Column("yield", String(255), nullable=True)
    instructions = Column(JSON, nullable=False, default=list)
    ingredients = Column(JSON, nullable=False, default=list)

    # Relationships
    owner = relationship("User", backref="recipes")
