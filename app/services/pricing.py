# app/services/pricing.py
from decimal import Decimal
from typing import Iterable

from app.schemas.cart import CartLine

ZERO = Decimal("0")

# Defaults; the engine reads the configured values from Settings
SHIPPING_FEE = Decimal("2.50")
FREE_SHIPPING_THRESHOLD = Decimal("15.00")


def compute_subtotal(lines: Iterable[CartLine]) -> Decimal:
    """Sum of price x quantity over all lines, unrounded."""
    return sum((line.price * line.quantity for line in lines), ZERO)


def compute_shipping_fee(
    subtotal: Decimal,
    fee: Decimal = SHIPPING_FEE,
    threshold: Decimal = FREE_SHIPPING_THRESHOLD,
) -> Decimal:
    """
    Flat fee up to and including the threshold, free strictly above it.
    """
    return ZERO if subtotal > threshold else fee


def compute_total(subtotal: Decimal, shipping_fee: Decimal, discount: Decimal) -> Decimal:
    """Subtotal + shipping - discount, never below zero."""
    return max(ZERO, subtotal + shipping_fee - discount)
