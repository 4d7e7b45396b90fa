# app/schemas/cart.py
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.promo import PromoDetails


class IngredientChoice(SQLModel):
    """
    One sub-selection of a custom sandwich (bread, protein, ...).

    Informational only: the line price already includes it.
    """

    id: str
    name: str
    price: Decimal = Field(ge=0)
    type: str | None = None
    image: str | None = None


class CartItemCreate(SQLModel):
    """
    Sandwich-shaped payload for adding to cart.

    The cart does not validate it against the catalog; whatever the
    storefront sends is copied into the new line.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    price: Decimal = Field(ge=0)
    image: str | None = None
    is_custom: bool = False
    ingredients: list[IngredientChoice] | None = None

    @field_validator("id", "name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class CartLine(CartItemCreate):
    """
    One distinct purchasable entry with a quantity.
    """

    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart line.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int = Field(gt=0)


class PromoApply(SQLModel):
    """
    Payload for applying a promo code.
    """

    model_config = ConfigDict(extra="forbid")

    code: str


class DeliveryAddress(SQLModel):
    """
    Delivery fields as presented to the shopper.

    locked=True means the values come from the applied promo code
    and are read-only.
    """

    address: str = ""
    city: str = ""
    zip_code: str = ""
    locked: bool = False


class Notification(SQLModel):
    """
    User-visible toast message.
    """

    level: Literal["success", "error"]
    message: str


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartLine]
    total_quantity: int
    subtotal: Decimal
    shipping_fee: Decimal
    discount: Decimal
    total: Decimal
    promo_code: str
    promo: PromoDetails | None = None
    address_locked: bool = False
    notifications: list[Notification] = Field(default_factory=list)
