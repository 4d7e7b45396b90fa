# app/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_cart_session
from app.schemas.order import (
    CustomerInfo,
    OrderConfirmation,
    OrderDetails,
    PaymentStatus,
)
from app.services.cart_sessions import CartSession
from app.services import payment_service

router = APIRouter(prefix="/checkout", tags=["Checkout"])


def _last_order_or_404(cart: CartSession) -> OrderDetails:
    order = cart.engine.last_order()
    if order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No submitted order",
        )
    return order


@router.post("", response_model=OrderDetails, status_code=status.HTTP_201_CREATED)
def submit_order(
    payload: CustomerInfo,
    cart: CartSession = Depends(get_cart_session),
):
    """
    Snapshot the cart into an order and empty the cart.

    Rules:
      - cart must not be empty
      - with a promo applied, the promo's delivery address is used
      - otherwise address, city and zip code are required

    The order is only handed to the payment/confirmation steps; it is
    not transmitted anywhere.
    """
    engine = cart.engine
    if not engine.lines:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cart is empty",
        )

    if not engine.address_locked and not (
        payload.address and payload.city and payload.zip_code
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Delivery address, city and zip code are required",
        )

    order = engine.submit_order(payload)
    cart.feed.success("Redirection vers la plateforme de paiement...")
    return order


@router.get("/payment", response_model=PaymentStatus)
def get_payment_status(cart: CartSession = Depends(get_cart_session)):
    """
    Simulated payment progress of the last submitted order.

    404 sends the shopper back to the cart.
    """
    return payment_service.payment_status(_last_order_or_404(cart))


@router.get("/confirmation", response_model=OrderConfirmation)
def get_confirmation(cart: CartSession = Depends(get_cart_session)):
    """
    Last submitted order with its estimated delivery time.
    """
    return payment_service.confirmation(_last_order_or_404(cart))
