# app/services/payment_service.py
from datetime import datetime, timedelta, timezone

from app.schemas.order import OrderConfirmation, OrderDetails, PaymentStatus

# Scripted payment: (stage, seconds since submission it lasts until, progress %)
PAYMENT_TIMELINE: list[tuple[str, float, int]] = [
    ("processing", 2.0, 40),
    ("verifying", 4.0, 80),
    ("approved", 6.0, 100),
]

# Delivery estimate shown on the confirmation page
DELIVERY_DELAY = timedelta(minutes=45)


def payment_status(order: OrderDetails, now: datetime | None = None) -> PaymentStatus:
    """
    Where the simulated payment of `order` stands at `now`.

    There is no gateway: the stage only depends on the time elapsed
    since the order was submitted.
    """
    now = now or datetime.now(timezone.utc)
    elapsed = (now - order.order_date).total_seconds()

    for stage, until, progress in PAYMENT_TIMELINE:
        if elapsed < until:
            return PaymentStatus(stage=stage, progress=progress, amount=order.order_total)

    return PaymentStatus(
        stage="complete",
        progress=100,
        amount=order.order_total,
        redirect_to_confirmation=True,
    )


def confirmation(order: OrderDetails) -> OrderConfirmation:
    return OrderConfirmation(
        **order.model_dump(),
        expected_delivery=order.order_date + DELIVERY_DELAY,
    )
