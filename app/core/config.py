# app/core/config.py
from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - SUPABASE_SERVICE_ROLE_KEY (admin writes + image uploads)
      - DATABASE_URL (cart/promo key-value store, defaults to local SQLite)
    """

    PROJECT_NAME: str = "Sandwich Shop API"
    API_V1_STR: str = "/api/v1"

    # Supabase config
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Service role key bypasses RLS (backend only)
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    # Storage bucket for sandwich / ingredient pictures
    STORAGE_BUCKET: str = "sandwich-images"

    # Shopper cart persistence
    DATABASE_URL: str = "sqlite:///./sandwich_shop.db"
    # Engines cached per process; the store stays authoritative
    CART_SESSION_CACHE_SIZE: int = 1024

    # Pricing
    SHIPPING_FEE: Decimal = Decimal("2.50")
    FREE_SHIPPING_THRESHOLD: Decimal = Decimal("15.00")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
