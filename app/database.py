# app/database.py
from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from app.core.config import get_settings

# ---------------------------------------------------------
# Key-value store backing (shopper carts + promo codes)
#
# - SQLite by default, one file next to the app
# - Postgres (e.g. Supabase pooler) when DATABASE_URL points there:
#     sslmode=require   : enforce SSL when running in the cloud
#     pool_size=1       : keep only 1 connection to the Supabase pooler
#     max_overflow=0    : do not open extra connections beyond the pool
#     pool_pre_ping=True: validate connections before using them
# ---------------------------------------------------------


def _normalize_url(db_url: str) -> str:
    """Append sslmode=require to Postgres URLs that don't set it."""
    if not db_url.startswith("postgresql") or "sslmode=" in db_url:
        return db_url
    if "?" in db_url:
        return db_url + "&sslmode=require"
    return db_url + "?sslmode=require"


@lru_cache
def get_engine() -> Engine:
    """
    Build the SQLAlchemy engine once per process.
    """
    db_url = _normalize_url(get_settings().DATABASE_URL)

    if db_url.startswith("sqlite"):
        # Store calls run in threadpool workers
        return create_engine(
            db_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        db_url,
        echo=False,        # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
    )


def create_db_and_tables(engine: Engine | None = None) -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine or get_engine())
