# app/schemas/order.py
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

from app.schemas.cart import CartLine

PaymentStage = Literal["processing", "verifying", "approved", "complete"]


class CustomerInfo(SQLModel):
    """
    Contact and delivery fields typed by the shopper at checkout.

    address / city / zip_code are overridden by the applied promo code
    when one is active (address lock).
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str
    last_name: str
    phone: str
    address: str = ""
    city: str = ""
    zip_code: str = ""

    @field_validator("first_name", "last_name", "phone")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("address", "city", "zip_code")
    @classmethod
    def strip(cls, v: str) -> str:
        return v.strip()


class OrderDetails(SQLModel):
    """
    Snapshot handed to the payment / confirmation steps.

    Created once at submission, never mutated afterwards.
    """

    order_items: list[CartLine]
    customer_info: CustomerInfo
    order_date: datetime
    subtotal: Decimal
    shipping_fee: Decimal
    order_total: Decimal
    promo_code: str | None = None
    discount: Decimal | None = None


class PaymentStatus(SQLModel):
    """
    Simulated payment progress for the last submitted order.
    """

    stage: PaymentStage
    progress: int
    amount: Decimal
    redirect_to_confirmation: bool = False


class OrderConfirmation(OrderDetails):
    """
    Order snapshot plus the estimated delivery time.
    """

    expected_delivery: datetime
