"""
Shared fixtures.

The Supabase-backed repositories and the SQL key-value store are
replaced with in-memory fakes; everything above them (engine, services,
routers) is the real code.
"""
import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import asyncio
import itertools
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.schemas.catalog import IngredientRead, SandwichRead
from app.schemas.promo import PromoCodeRead, PromoDetails
from app.services.cart_engine import CartEngine
from app.services.cart_sessions import CartSessionRegistry
from app.services.catalog_service import CatalogService
from app.services.notifications import NotificationFeed
from app.services.promo_service import PromoCodeService, SupabasePromoLookup


# ==================== Fakes ====================


class InMemoryKeyValueStore:
    """KeyValueStore backed by a dict."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class FakePromoLookup:
    """
    Async promo lookup over a dict of records.

    - only active records are returned, like the `active = true` filter
    - `gates[code]` holds a lookup until the event is set
    - `fail=True` simulates a backend error
    """

    def __init__(self, records: dict[str, PromoDetails]):
        self.records = records
        self.calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.fail = False

    async def __call__(self, code: str) -> PromoDetails | None:
        self.calls.append(code)
        gate = self.gates.get(code)
        if gate is not None:
            await gate.wait()
        if self.fail:
            raise RuntimeError("backend unavailable")
        record = self.records.get(code)
        return record if record and record.active else None


class FakeTableRepository:
    """In-memory stand-in for a Supabase table repository."""

    def __init__(self, model, rows: list[dict[str, Any]] | None = None):
        self.model = model
        self._ids = itertools.count(1000)
        self.rows: dict[str, dict[str, Any]] = {}
        for row in rows or []:
            self.rows[str(row["id"])] = dict(row)

    def list(self, *args):
        return [self.model.model_validate(row) for row in self.rows.values()]

    def get_by_id(self, row_id: str):
        row = self.rows.get(row_id)
        return self.model.model_validate(row) if row else None

    def create(self, values: dict[str, Any]):
        row = {"id": str(next(self._ids)), **values}
        self.rows[row["id"]] = row
        return self.model.model_validate(row)

    def update(self, row_id: str, values: dict[str, Any]):
        if row_id not in self.rows:
            return None
        self.rows[row_id].update(values)
        return self.model.model_validate(self.rows[row_id])

    def delete(self, row_id: str) -> bool:
        return self.rows.pop(row_id, None) is not None


class FakePromoCodeRepository(FakeTableRepository):
    def __init__(self, rows: list[dict[str, Any]]):
        super().__init__(PromoCodeRead, rows)

    def find_active(self, code: str) -> PromoDetails | None:
        for row in self.rows.values():
            if row["code"] == code and row["active"]:
                return PromoDetails.model_validate(row)
        return None


class FakeIngredientRepository(FakeTableRepository):
    def __init__(self, rows: list[dict[str, Any]]):
        super().__init__(IngredientRead, rows)

    def list(self, ingredient_type: str | None = None):
        rows = sorted(self.rows.values(), key=lambda r: (r["type"], r["name"]))
        return [
            IngredientRead.model_validate(row)
            for row in rows
            if not ingredient_type or row["type"] == ingredient_type
        ]


class FakeRoleRepository:
    def __init__(self, admin_ids: set[str]):
        self.admin_ids = admin_ids

    def has_role(self, user_id, role: str) -> bool:
        return role == "admin" and str(user_id) in self.admin_ids


# ==================== Data ====================

PROMO_ROWS = [
    {
        "id": "1",
        "code": "NOEL2023",
        "discount": "10",
        "delivery_address": "12 Rue de Noël",
        "delivery_city": "Paris",
        "delivery_zipcode": "75001",
        "active": True,
    },
    {
        "id": "2",
        "code": "ETE2022",
        "discount": "5",
        "delivery_address": "3 Quai du Port",
        "delivery_city": "Marseille",
        "delivery_zipcode": "13002",
        "active": False,
    },
    {
        "id": "3",
        "code": "BUREAU",
        "discount": "3",
        "delivery_address": "1 Avenue du Travail",
        "delivery_city": "Lyon",
        "delivery_zipcode": "69003",
        "active": True,
    },
]

INGREDIENT_ROWS = [
    {"id": "baguette", "name": "Baguette traditionnelle", "price": "2.0", "type": "bread"},
    {"id": "ciabatta", "name": "Ciabatta", "price": "2.5", "type": "bread"},
    {"id": "poulet", "name": "Poulet rôti", "price": "2.5", "type": "protein"},
    {"id": "thon", "name": "Thon mayonnaise", "price": "2.5", "type": "protein"},
    {"id": "salade", "name": "Salade", "price": "0.5", "type": "veggie"},
    {"id": "tomate", "name": "Tomate", "price": "0.5", "type": "veggie"},
    {"id": "oignon", "name": "Oignon rouge", "price": "0.3", "type": "veggie"},
    {"id": "mayonnaise", "name": "Mayonnaise", "price": "0.3", "type": "sauce"},
    {"id": "bbq", "name": "Sauce BBQ", "price": "0.4", "type": "sauce"},
]

SANDWICH_ROWS = [
    {"id": "jambon-beurre", "name": "Jambon Beurre", "description": "Le classique", "price": "8.50"},
    {"id": "poulet-curry", "name": "Poulet Curry", "description": "Épicé", "price": "7.90"},
]


def _sandwich(item_id: str = "jambon-beurre", price: str = "8.50", **extra) -> dict[str, Any]:
    return {
        "id": item_id,
        "name": extra.pop("name", item_id.replace("-", " ").title()),
        "description": extra.pop("description", ""),
        "price": price,
        **extra,
    }


# ==================== Fixtures ====================


@pytest.fixture
def make_item():
    """Factory for cart item payloads shaped like a catalog sandwich."""
    return _sandwich


@pytest.fixture
def promo_records() -> dict[str, PromoDetails]:
    return {row["code"]: PromoDetails.model_validate(row) for row in PROMO_ROWS}


@pytest.fixture
def promo_lookup(promo_records) -> FakePromoLookup:
    return FakePromoLookup(promo_records)


@pytest.fixture
def make_store():
    return InMemoryKeyValueStore


@pytest.fixture
def store(make_store) -> InMemoryKeyValueStore:
    return make_store()


@pytest.fixture
def feed() -> NotificationFeed:
    return NotificationFeed("test-session")


@pytest.fixture
def engine(store, promo_lookup, feed) -> CartEngine:
    return CartEngine(store=store, promo_lookup=promo_lookup, notifier=feed)


@pytest.fixture
def promo_repo() -> FakePromoCodeRepository:
    return FakePromoCodeRepository(PROMO_ROWS)


@pytest.fixture
def catalog_service() -> CatalogService:
    return CatalogService(
        FakeTableRepository(SandwichRead, SANDWICH_ROWS),
        FakeIngredientRepository(INGREDIENT_ROWS),
    )


@pytest.fixture
def admin_id() -> str:
    return "7f1c8a52-6a7e-4a53-9d0e-3b1f4d2a9c11"


@pytest_asyncio.fixture
async def client(promo_repo, catalog_service, admin_id):
    """
    Async client over the real app with Supabase and the SQL store
    swapped for fakes. The lifespan is not run.
    """
    from app.core.auth import get_user_role_repo
    from app.dependencies import (
        get_admin_catalog_service,
        get_cart_sessions,
        get_catalog_service,
        get_promo_code_service,
    )
    from app.main import app

    stores: dict[str, InMemoryKeyValueStore] = {}
    registry = CartSessionRegistry(
        store_factory=lambda session_id: stores.setdefault(session_id, InMemoryKeyValueStore()),
        promo_lookup=SupabasePromoLookup(promo_repo),
    )

    app.dependency_overrides[get_cart_sessions] = lambda: registry
    app.dependency_overrides[get_catalog_service] = lambda: catalog_service
    app.dependency_overrides[get_admin_catalog_service] = lambda: catalog_service
    app.dependency_overrides[get_promo_code_service] = lambda: PromoCodeService(promo_repo)
    app.dependency_overrides[get_user_role_repo] = lambda: FakeRoleRepository({admin_id})

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        ac.stores = stores
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def shopper() -> dict[str, str]:
    return {"X-Cart-Session": "shopper-1"}
