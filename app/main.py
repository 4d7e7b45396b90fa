# app/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from app.core.config import get_settings
from app.core.supabase_client import supabase_public
from app.database import create_db_and_tables, get_engine

# Import models so SQLModel metadata is populated before create_all()
from app.models import kv_entry as _kv_models  # noqa: F401

from app.repositories.kv_store import SqlKeyValueStore
from app.repositories.promo_repo import PromoCodeRepository
from app.services.cart_sessions import CartSessionRegistry
from app.services.promo_service import SupabasePromoLookup

# Routers
from app.routers.cart import router as cart_router
from app.routers.builder import router as builder_router
from app.routers.checkout import router as checkout_router
from app.routers.catalog import router as catalog_router
from app.routers.admin_catalog import router as admin_catalog_router
from app.routers.admin_promo import router as admin_promo_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Create the key-value table backing shopper carts.
      - Build the cart session registry (promo lookups go to Supabase).

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("🔄 Startup: preparing cart store...")
    try:
        engine = get_engine()
        create_db_and_tables(engine)
        logger.info("✅ Startup: cart store OK, tables verified.")
    except Exception as e:
        logger.error(f"❌ Startup: cart store FAILED: {e}")
        raise

    app.state.cart_sessions = CartSessionRegistry(
        store_factory=lambda session_id: SqlKeyValueStore(engine, session_id),
        promo_lookup=SupabasePromoLookup(PromoCodeRepository(supabase_public())),
        shipping_fee=settings.SHIPPING_FEE,
        free_shipping_threshold=settings.FREE_SHIPPING_THRESHOLD,
        max_sessions=settings.CART_SESSION_CACHE_SIZE,
    )
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "Sandwich Shop API",
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(catalog_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(builder_router, prefix=settings.API_V1_STR)
app.include_router(checkout_router, prefix=settings.API_V1_STR)
app.include_router(admin_catalog_router, prefix=settings.API_V1_STR)
app.include_router(admin_promo_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "sandwich-shop-backend"}
