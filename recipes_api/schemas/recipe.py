"""Recipe schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# --- Ingredient ---


class Ingredient(BaseModel):
    """Ingredient embedded in a recipe."""

    name: str | None = Field(None, max_length=255)
    preparation: str | None = Field(None, max_length=2000)
    cost: str | None = Field(None, max_length=50)
    amount: str | None = Field(None, max_length=100)


# --- Recipe ---


class RecipePayload(BaseModel):
    """Client-supplied recipe document for create and full replace.

    Unknown keys (including any client-supplied id or owner) are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = Field(None, max_length=255)
    price: float | None = None
    description: str | None = Field(None, max_length=2000)
    image: str | None = Field(None, max_length=255)
    yield_: str | None = Field(None, alias="yield", max_length=255)
    instructions: list[str] = []
    ingredients: list[Ingredient] = []


class RecipeResponse(BaseModel):
    """Recipe response."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    owner_id: str
    name: str | None
    price: float | None
    description: str | None
    image: str | None
    yield_: str | None = Field(serialization_alias="yield")
    instructions: list[str]
    ingredients: list[Ingredient]
    created_at: datetime
    updated_at: datetime
