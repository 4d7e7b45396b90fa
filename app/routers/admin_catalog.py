# app/routers/admin_catalog.py
from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    UploadFile,
    status,
)

from app.core.auth import require_admin
from app.dependencies import get_admin_catalog_service
from app.schemas.catalog import (
    IngredientCreate,
    IngredientRead,
    IngredientType,
    IngredientUpdate,
    SandwichCreate,
    SandwichRead,
    SandwichUpdate,
)
from app.services.catalog_service import CatalogService

router = APIRouter(
    prefix="/admin",
    tags=["Admin catalog"],
    dependencies=[Depends(require_admin)],
)


def _read_upload(file: UploadFile) -> tuple[str, bytes]:
    if not file.content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing content-type for uploaded file",
        )
    return file.content_type, file.file.read()


# -------- Sandwiches --------


@router.get("/sandwiches", response_model=list[SandwichRead])
def list_sandwiches(service: CatalogService = Depends(get_admin_catalog_service)):
    return service.list_sandwiches()


@router.post(
    "/sandwiches",
    response_model=SandwichRead,
    status_code=status.HTTP_201_CREATED,
)
def create_sandwich(
    payload: SandwichCreate,
    service: CatalogService = Depends(get_admin_catalog_service),
):
    """
    Create a new sandwich (admin only).
    """
    return service.create_sandwich(payload)


@router.patch("/sandwiches/{sandwich_id}", response_model=SandwichRead)
def update_sandwich(
    sandwich_id: str,
    payload: SandwichUpdate,
    service: CatalogService = Depends(get_admin_catalog_service),
):
    """
    Update an existing sandwich (admin only).
    """
    return service.update_sandwich(sandwich_id, payload)


@router.delete("/sandwiches/{sandwich_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_sandwich(
    sandwich_id: str,
    service: CatalogService = Depends(get_admin_catalog_service),
):
    """
    Delete a sandwich and its picture (admin only).
    """
    service.delete_sandwich(sandwich_id)
    return None


@router.post(
    "/sandwiches/{sandwich_id}/image",
    response_model=SandwichRead,
    summary="Upload or replace the picture of a sandwich",
)
def upload_sandwich_image(
    sandwich_id: str,
    file: UploadFile = File(...),
    service: CatalogService = Depends(get_admin_catalog_service),
):
    """
    - Accepts JPEG, PNG, WEBP (max 5MB).
    - The previous picture is removed from Storage.
    """
    content_type, file_bytes = _read_upload(file)
    return service.set_sandwich_image(sandwich_id, content_type, file_bytes)


# -------- Ingredients --------


@router.get("/ingredients", response_model=list[IngredientRead])
def list_ingredients(
    service: CatalogService = Depends(get_admin_catalog_service),
    type: IngredientType | None = None,
    search: str | None = None,
):
    return service.list_ingredients(type, search)


@router.post(
    "/ingredients",
    response_model=IngredientRead,
    status_code=status.HTTP_201_CREATED,
)
def create_ingredient(
    payload: IngredientCreate,
    service: CatalogService = Depends(get_admin_catalog_service),
):
    return service.create_ingredient(payload)


@router.patch("/ingredients/{ingredient_id}", response_model=IngredientRead)
def update_ingredient(
    ingredient_id: str,
    payload: IngredientUpdate,
    service: CatalogService = Depends(get_admin_catalog_service),
):
    return service.update_ingredient(ingredient_id, payload)


@router.delete("/ingredients/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ingredient(
    ingredient_id: str,
    service: CatalogService = Depends(get_admin_catalog_service),
):
    service.delete_ingredient(ingredient_id)
    return None


@router.post(
    "/ingredients/{ingredient_id}/image",
    response_model=IngredientRead,
    summary="Upload or replace the picture of an ingredient",
)
def upload_ingredient_image(
    ingredient_id: str,
    file: UploadFile = File(...),
    service: CatalogService = Depends(get_admin_catalog_service),
):
    content_type, file_bytes = _read_upload(file)
    return service.set_ingredient_image(ingredient_id, content_type, file_bytes)
