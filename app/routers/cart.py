# app/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_cart_session
from app.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartSummary,
    DeliveryAddress,
    PromoApply,
)
from app.services.cart_engine import InvalidQuantityError
from app.services.cart_sessions import CartSession

router = APIRouter(prefix="/cart", tags=["Cart"])


def _summary(cart: CartSession) -> CartSummary:
    summary = cart.engine.summary()
    summary.notifications = cart.feed.drain()
    return summary


@router.get("", response_model=CartSummary)
def get_my_cart(cart: CartSession = Depends(get_cart_session)):
    """
    Get the shopper's cart summary.

    Totals include the shipping fee (waived above the free-shipping
    threshold) and the promo discount, floored at zero.
    """
    return _summary(cart)


@router.post("/items", response_model=CartSummary)
def add_to_cart(
    payload: CartItemCreate,
    cart: CartSession = Depends(get_cart_session),
):
    """
    Add one unit of a sandwich to the cart.

    Adding an id already in the cart bumps its quantity.
    """
    cart.engine.add_item(payload)
    return _summary(cart)


@router.patch("/items/{item_id}", response_model=CartSummary)
def update_cart_item(
    item_id: str,
    payload: CartItemUpdate,
    cart: CartSession = Depends(get_cart_session),
):
    """
    Set the quantity of a cart line. Unknown ids are ignored.
    """
    try:
        cart.engine.update_quantity(item_id, payload.quantity)
    except InvalidQuantityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _summary(cart)


@router.delete("/items/{item_id}", response_model=CartSummary)
def remove_cart_item(
    item_id: str,
    cart: CartSession = Depends(get_cart_session),
):
    """
    Remove a line from the cart (no-op if absent).
    """
    cart.engine.remove_item(item_id)
    return _summary(cart)


@router.delete("", response_model=CartSummary)
def clear_cart(cart: CartSession = Depends(get_cart_session)):
    """
    Empty the cart and drop the promo code.
    """
    cart.engine.clear()
    return _summary(cart)


@router.put("/promo", response_model=CartSummary)
async def apply_promo(
    payload: PromoApply,
    cart: CartSession = Depends(get_cart_session),
):
    """
    Apply a promo code.

    The code is uppercased here, the way the storefront input does it.
    A failed lookup is not an HTTP error: the summary comes back
    without a promo and with an error notification.
    """
    code = payload.code.strip().upper()
    if not code:
        cart.feed.error("Veuillez saisir un code promo")
    await cart.engine.apply_promo_code(code)
    return _summary(cart)


@router.delete("/promo", response_model=CartSummary)
def remove_promo(cart: CartSession = Depends(get_cart_session)):
    """
    Remove the promo code; cart lines are kept.
    """
    cart.engine.remove_promo_code()
    return _summary(cart)


@router.post("/delivery", response_model=DeliveryAddress)
def resolve_delivery(
    payload: DeliveryAddress,
    cart: CartSession = Depends(get_cart_session),
):
    """
    Delivery fields to render on the checkout form.

    With a promo applied they are the promo's address and `locked`;
    otherwise the typed values come back editable.
    """
    return cart.engine.delivery_address(payload)
