# app/repositories/catalog_repo.py
from typing import Any

from supabase import Client

from app.schemas.catalog import IngredientRead, SandwichRead


class SandwichRepository:
    """
    Data access layer for the Supabase `sandwiches` table.
    """

    TABLE = "sandwiches"

    def __init__(self, client: Client):
        self.client = client

    def list(self) -> list[SandwichRead]:
        res = self.client.table(self.TABLE).select("*").order("name").execute()
        return [SandwichRead.model_validate(row) for row in res.data or []]

    def get_by_id(self, sandwich_id: str) -> SandwichRead | None:
        res = self.client.table(self.TABLE).select("*").eq("id", sandwich_id).limit(1).execute()
        if not res.data:
            return None
        return SandwichRead.model_validate(res.data[0])

    def create(self, values: dict[str, Any]) -> SandwichRead:
        res = self.client.table(self.TABLE).insert(values).execute()
        return SandwichRead.model_validate(res.data[0])

    def update(self, sandwich_id: str, values: dict[str, Any]) -> SandwichRead | None:
        res = self.client.table(self.TABLE).update(values).eq("id", sandwich_id).execute()
        if not res.data:
            return None
        return SandwichRead.model_validate(res.data[0])

    def delete(self, sandwich_id: str) -> bool:
        res = self.client.table(self.TABLE).delete().eq("id", sandwich_id).execute()
        return bool(res.data)


class IngredientRepository:
    """
    Data access layer for the Supabase `ingredients` table.

    Rows are ordered by type, then name.
    """

    TABLE = "ingredients"

    def __init__(self, client: Client):
        self.client = client

    def list(self, ingredient_type: str | None = None) -> list[IngredientRead]:
        query = self.client.table(self.TABLE).select("*")
        if ingredient_type:
            query = query.eq("type", ingredient_type)
        res = query.order("type").order("name").execute()
        return [IngredientRead.model_validate(row) for row in res.data or []]

    def get_by_id(self, ingredient_id: str) -> IngredientRead | None:
        res = self.client.table(self.TABLE).select("*").eq("id", ingredient_id).limit(1).execute()
        if not res.data:
            return None
        return IngredientRead.model_validate(res.data[0])

    def create(self, values: dict[str, Any]) -> IngredientRead:
        res = self.client.table(self.TABLE).insert(values).execute()
        return IngredientRead.model_validate(res.data[0])

    def update(self, ingredient_id: str, values: dict[str, Any]) -> IngredientRead | None:
        res = self.client.table(self.TABLE).update(values).eq("id", ingredient_id).execute()
        if not res.data:
            return None
        return IngredientRead.model_validate(res.data[0])

    def delete(self, ingredient_id: str) -> bool:
        res = self.client.table(self.TABLE).delete().eq("id", ingredient_id).execute()
        return bool(res.data)
