import asyncio
import json

import pytest

from app.schemas.cart import CartItemCreate
from app.services.cart_engine import CART_KEY, PROMO_KEY
from app.services.cart_sessions import CartSessionRegistry


@pytest.fixture
def stores() -> dict:
    """Backing store per session id, shared by every registry in a test."""
    return {}


@pytest.fixture
def make_registry(stores, make_store, promo_lookup):
    def factory(**kwargs) -> CartSessionRegistry:
        return CartSessionRegistry(
            store_factory=lambda session_id: stores.setdefault(session_id, make_store()),
            promo_lookup=promo_lookup,
            **kwargs,
        )

    return factory


async def test_same_session_id_returns_same_session(make_registry):
    registry = make_registry()

    first = await registry.get("shopper-1")
    again = await registry.get("shopper-1")

    assert first is again
    assert len(registry) == 1


async def test_cache_is_bounded(make_registry):
    registry = make_registry(max_sessions=3)

    for n in range(50):
        await registry.get(f"shopper-{n}")

    assert len(registry) == 3


async def test_least_recently_used_session_is_evicted(make_registry):
    registry = make_registry(max_sessions=2)

    a = await registry.get("a")
    await registry.get("b")
    assert await registry.get("a") is a

    await registry.get("c")

    assert await registry.get("a") is a
    assert len(registry) == 2


async def test_evicted_session_is_rebuilt_from_store(make_registry, make_item):
    registry = make_registry(max_sessions=1)

    session = await registry.get("a")
    session.engine.add_item(CartItemCreate(**make_item("x")))
    await registry.get("b")

    rebuilt = await registry.get("a")

    assert rebuilt is not session
    assert [line.id for line in rebuilt.engine.lines] == ["x"]


async def test_registries_sharing_a_store_do_not_lose_lines(make_registry, stores, make_item):
    worker_a = make_registry()
    worker_b = make_registry()

    sa = await worker_a.get("shopper-1")
    sb = await worker_b.get("shopper-1")
    sa.engine.add_item(CartItemCreate(**make_item("x")))
    sb.engine.add_item(CartItemCreate(**make_item("y")))

    persisted = json.loads(stores["shopper-1"].get(CART_KEY))
    assert [line["id"] for line in persisted] == ["x", "y"]

    sa = await worker_a.get("shopper-1")
    assert [line.id for line in sa.engine.lines] == ["x", "y"]


async def test_concurrent_first_access_resolves_promo_once(
    make_registry, stores, make_store, promo_lookup
):
    stores["shopper-1"] = make_store({PROMO_KEY: "NOEL2023"})
    registry = make_registry()

    first, second = await asyncio.gather(
        registry.get("shopper-1"), registry.get("shopper-1")
    )

    assert first is second
    assert first.engine.promo_details.code == "NOEL2023"
    assert promo_lookup.calls == ["NOEL2023"]


async def test_failed_restore_is_not_cached(promo_lookup):
    class BrokenStore:
        def get(self, key):
            raise RuntimeError("database unavailable")

    registry = CartSessionRegistry(
        store_factory=lambda session_id: BrokenStore(), promo_lookup=promo_lookup
    )

    with pytest.raises(RuntimeError):
        await registry.get("shopper-1")

    assert len(registry) == 0
