# app/schemas/promo.py
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class PromoDetails(SQLModel):
    """
    Resolved promo code record (row of the `promo_codes` table).

    Grants a flat discount and pins the delivery address.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    code: str
    discount: Decimal = Field(ge=0)
    delivery_address: str
    delivery_city: str
    delivery_zipcode: str
    active: bool = True

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        # Supabase may hand back integer or uuid primary keys
        return str(v)


class PromoCodeRead(PromoDetails):
    """
    Admin listing row.
    """

    created_at: datetime | None = None


class PromoCodeCreate(SQLModel):
    """
    Payload for creating a promo code.

    - code is stored uppercase
    - new codes are always active
    """

    model_config = ConfigDict(extra="forbid")

    code: str = Field(max_length=50)
    discount: Decimal = Field(gt=0)
    delivery_address: str
    delivery_city: str
    delivery_zipcode: str

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("code cannot be empty")
        return v

    @field_validator("delivery_address", "delivery_city", "delivery_zipcode")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class PromoCodeUpdate(SQLModel):
    """
    Partial update payload for promo codes.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    code: str | None = Field(default=None, max_length=50)
    discount: Decimal | None = Field(default=None, gt=0)
    delivery_address: str | None = None
    delivery_city: str | None = None
    delivery_zipcode: str | None = None
    active: bool | None = None

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip().upper()
        if not v:
            raise ValueError("code cannot be empty")
        return v
