# app/routers/builder.py
from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_cart_session, get_catalog_service
from app.schemas.cart import CartSummary
from app.schemas.catalog import BuilderOptions, CustomSandwichCreate
from app.services.builder_service import BuilderError, CustomSandwichBuilder, group_options
from app.services.cart_sessions import CartSession
from app.services.catalog_service import CatalogService

router = APIRouter(prefix="/builder", tags=["Custom sandwich"])


@router.get("/options", response_model=BuilderOptions)
def list_builder_options(service: CatalogService = Depends(get_catalog_service)):
    """
    Ingredients for each builder step (bread, protein, veggie, sauce).
    """
    return group_options(service.list_ingredients())


@router.post("/custom-sandwich", response_model=CartSummary)
def add_custom_sandwich(
    payload: CustomSandwichCreate,
    cart: CartSession = Depends(get_cart_session),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Build a custom sandwich from the wizard selections and add it to
    the cart.

    Prices come from the catalog, not from the client.
    """
    options = group_options(service.list_ingredients())
    try:
        item = CustomSandwichBuilder(options).build(payload)
    except BuilderError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    cart.engine.add_item(item)
    summary = cart.engine.summary()
    summary.notifications = cart.feed.drain()
    return summary
