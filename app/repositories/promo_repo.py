# app/repositories/promo_repo.py
from typing import Any

from supabase import Client

from app.schemas.promo import PromoCodeRead, PromoDetails


class PromoCodeRepository:
    """
    Data access layer for the Supabase `promo_codes` table.

    - Pure table operations (queries + CRUD).
    - No FastAPI, no business logic.
    """

    TABLE = "promo_codes"

    def __init__(self, client: Client):
        self.client = client

    def find_active(self, code: str) -> PromoDetails | None:
        """
        Exact, case-sensitive match on `code` restricted to active rows.
        """
        res = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("code", code)
            .eq("active", True)
            .limit(1)
            .execute()
        )
        if not res.data:
            return None
        return PromoDetails.model_validate(res.data[0])

    def list(self) -> list[PromoCodeRead]:
        res = (
            self.client.table(self.TABLE)
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        return [PromoCodeRead.model_validate(row) for row in res.data or []]

    def get_by_id(self, promo_id: str) -> PromoCodeRead | None:
        res = self.client.table(self.TABLE).select("*").eq("id", promo_id).limit(1).execute()
        if not res.data:
            return None
        return PromoCodeRead.model_validate(res.data[0])

    def create(self, values: dict[str, Any]) -> PromoCodeRead:
        res = self.client.table(self.TABLE).insert(values).execute()
        return PromoCodeRead.model_validate(res.data[0])

    def update(self, promo_id: str, values: dict[str, Any]) -> PromoCodeRead | None:
        res = self.client.table(self.TABLE).update(values).eq("id", promo_id).execute()
        if not res.data:
            return None
        return PromoCodeRead.model_validate(res.data[0])

    def delete(self, promo_id: str) -> bool:
        res = self.client.table(self.TABLE).delete().eq("id", promo_id).execute()
        return bool(res.data)
