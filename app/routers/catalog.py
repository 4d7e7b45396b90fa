# app/routers/catalog.py
from fastapi import APIRouter, Depends

from app.dependencies import get_catalog_service
from app.schemas.catalog import IngredientRead, IngredientType, SandwichRead
from app.services.catalog_service import CatalogService

router = APIRouter(prefix="/catalog", tags=["Catalog"])


@router.get("/sandwiches", response_model=list[SandwichRead])
def list_sandwiches(service: CatalogService = Depends(get_catalog_service)):
    """
    List sandwiches (public).
    """
    return service.list_sandwiches()


@router.get("/sandwiches/{sandwich_id}", response_model=SandwichRead)
def get_sandwich(
    sandwich_id: str,
    service: CatalogService = Depends(get_catalog_service),
):
    return service.get_sandwich(sandwich_id)


@router.get("/ingredients", response_model=list[IngredientRead])
def list_ingredients(
    service: CatalogService = Depends(get_catalog_service),
    type: IngredientType | None = None,
    search: str | None = None,
):
    """
    List ingredients (public), ordered by type then name.

    - `type` filters on bread / protein / veggie / sauce.
    - `search` matches the name, case-insensitive.
    """
    return service.list_ingredients(type, search)
