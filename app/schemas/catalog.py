# app/schemas/catalog.py
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

IngredientType = Literal["bread", "protein", "veggie", "sauce"]

PLACEHOLDER_IMAGE = "/placeholder.svg"


class _CatalogRow(SQLModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    created_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v)


# ----- Sandwiches -----


class SandwichRead(_CatalogRow):
    """
    Catalog sandwich as shown on the storefront.
    """

    name: str
    description: str = ""
    price: Decimal
    image: str | None = PLACEHOLDER_IMAGE


class SandwichCreate(SQLModel):
    """
    Payload for creating a sandwich.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str = ""
    price: Decimal = Field(gt=0)
    image: str = PLACEHOLDER_IMAGE

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class SandwichUpdate(SQLModel):
    """
    Partial update payload for sandwiches.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    description: str | None = None
    price: Decimal | None = Field(default=None, gt=0)
    image: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


# ----- Ingredients -----


class IngredientRead(_CatalogRow):
    """
    Build-your-own option.
    """

    name: str
    price: Decimal
    type: IngredientType
    image: str | None = PLACEHOLDER_IMAGE
    updated_at: datetime | None = None


class IngredientCreate(SQLModel):
    """
    Payload for creating an ingredient.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    price: Decimal = Field(ge=0)
    type: IngredientType
    image: str = PLACEHOLDER_IMAGE

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class IngredientUpdate(SQLModel):
    """
    Partial update payload for ingredients.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    price: Decimal | None = Field(default=None, ge=0)
    type: IngredientType | None = None
    image: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


# ----- Custom sandwich builder -----


class BuilderOptions(SQLModel):
    """
    Options for each step of the build-your-own wizard.
    """

    bread: list[IngredientRead]
    protein: list[IngredientRead]
    veggie: list[IngredientRead]
    sauce: list[IngredientRead]


class CustomSandwichCreate(SQLModel):
    """
    Selections made across the four builder steps.

    - bread: exactly one
    - protein: exactly one
    - veggies: at least one
    - sauces: optional
    """

    model_config = ConfigDict(extra="forbid")

    bread_id: str
    protein_id: str
    veggie_ids: list[str] = Field(default_factory=list)
    sauce_ids: list[str] = Field(default_factory=list)
