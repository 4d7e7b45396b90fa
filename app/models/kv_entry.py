# app/models/kv_entry.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class KeyValueEntry(SQLModel, table=True):
    """
    One persisted string entry of a shopper session.

    Keys used by the cart:
      - "sandwich-cart": JSON array of cart lines
      - "promo-code":    plain promo code string
      - "orderDetails":  JSON order snapshot for payment / confirmation
    """

    __tablename__ = "kv_entries"

    namespace: str = Field(
        primary_key=True,
        max_length=100,
        description="Shopper session id",
    )

    key: str = Field(
        primary_key=True,
        max_length=100,
    )

    value: str = Field(
        description="Serialized value",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last write timestamp (UTC)",
    )
