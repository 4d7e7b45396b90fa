# app/routers/admin_promo.py
from fastapi import APIRouter, Depends, status

from app.core.auth import require_admin
from app.dependencies import get_promo_code_service
from app.schemas.promo import PromoCodeCreate, PromoCodeRead, PromoCodeUpdate
from app.services.promo_service import PromoCodeService

router = APIRouter(
    prefix="/admin/promo-codes",
    tags=["Admin promo codes"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=list[PromoCodeRead])
def list_promo_codes(service: PromoCodeService = Depends(get_promo_code_service)):
    """
    List all promo codes, newest first (admin only).
    """
    return service.list_promo_codes()


@router.post("", response_model=PromoCodeRead, status_code=status.HTTP_201_CREATED)
def create_promo_code(
    payload: PromoCodeCreate,
    service: PromoCodeService = Depends(get_promo_code_service),
):
    """
    Create an active promo code (admin only). The code is uppercased.
    """
    return service.create_promo_code(payload)


@router.patch("/{promo_id}", response_model=PromoCodeRead)
def update_promo_code(
    promo_id: str,
    payload: PromoCodeUpdate,
    service: PromoCodeService = Depends(get_promo_code_service),
):
    """
    Partial update, including toggling `active` (admin only).
    """
    return service.update_promo_code(promo_id, payload)


@router.delete("/{promo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_promo_code(
    promo_id: str,
    service: PromoCodeService = Depends(get_promo_code_service),
):
    service.delete_promo_code(promo_id)
    return None
