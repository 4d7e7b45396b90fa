# app/dependencies.py
from fastapi import Depends, Header, Request

from app.core.supabase_client import supabase_admin, supabase_public
from app.repositories.catalog_repo import IngredientRepository, SandwichRepository
from app.repositories.promo_repo import PromoCodeRepository
from app.services.cart_sessions import CartSession, CartSessionRegistry
from app.services.catalog_service import CatalogService
from app.services.promo_service import PromoCodeService


def get_cart_sessions(request: Request) -> CartSessionRegistry:
    """Registry created in the app lifespan."""
    return request.app.state.cart_sessions


async def get_cart_session(
    x_cart_session: str = Header(min_length=1, max_length=100),
    sessions: CartSessionRegistry = Depends(get_cart_sessions),
) -> CartSession:
    """
    Resolve the shopper's cart from the `X-Cart-Session` header.

    The storefront generates the id once and keeps it client-side.
    """
    return await sessions.get(x_cart_session)


def get_catalog_service() -> CatalogService:
    """Storefront reads (anon key, RLS applies)."""
    client = supabase_public()
    return CatalogService(SandwichRepository(client), IngredientRepository(client))


def get_admin_catalog_service() -> CatalogService:
    """Back office writes (service role key)."""
    client = supabase_admin()
    return CatalogService(SandwichRepository(client), IngredientRepository(client))


def get_promo_code_service() -> PromoCodeService:
    return PromoCodeService(PromoCodeRepository(supabase_admin()))
