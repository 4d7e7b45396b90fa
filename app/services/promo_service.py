# app/services/promo_service.py
from fastapi import HTTPException, status
from starlette.concurrency import run_in_threadpool

from app.repositories.promo_repo import PromoCodeRepository
from app.schemas.promo import (
    PromoCodeCreate,
    PromoCodeRead,
    PromoCodeUpdate,
    PromoDetails,
)


class SupabasePromoLookup:
    """
    Async promo lookup for the cart engine.

    The Supabase client is synchronous, so the query runs in the
    threadpool to keep the event loop free.
    """

    def __init__(self, repo: PromoCodeRepository):
        self.repo = repo

    async def __call__(self, code: str) -> PromoDetails | None:
        return await run_in_threadpool(self.repo.find_active, code)


class PromoCodeService:
    """
    Back office operations on promo codes.

    Responsibilities:
      - 404 on unknown ids
      - uppercase codes, new codes always active
      - admin-only (enforced at router via require_admin)
    """

    def __init__(self, repo: PromoCodeRepository):
        self.repo = repo

    def list_promo_codes(self) -> list[PromoCodeRead]:
        return self.repo.list()

    def get_promo_code(self, promo_id: str) -> PromoCodeRead:
        promo = self.repo.get_by_id(promo_id)
        if not promo:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Promo code not found",
            )
        return promo

    def create_promo_code(self, payload: PromoCodeCreate) -> PromoCodeRead:
        values = payload.model_dump(mode="json")
        values["active"] = True
        return self.repo.create(values)

    def update_promo_code(self, promo_id: str, payload: PromoCodeUpdate) -> PromoCodeRead:
        values = payload.model_dump(mode="json", exclude_unset=True)
        if not values:
            return self.get_promo_code(promo_id)

        promo = self.repo.update(promo_id, values)
        if not promo:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Promo code not found",
            )
        return promo

    def delete_promo_code(self, promo_id: str) -> None:
        if not self.repo.delete(promo_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Promo code not found",
            )
