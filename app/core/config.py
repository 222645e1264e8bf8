# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - DATABASE_URL (defaults to a local SQLite file)
      - SUPABASE_URL / SUPABASE_KEY / SUPABASE_SERVICE_ROLE_KEY
        (only used for product image uploads to Storage)
      - GOOGLE_API_KEY (handed to signed-in clients for the map picker)
    """

    PROJECT_NAME: str = "Floralshop Storefront API"
    API_V1_STR: str = "/api/v1"

    # DB config
    DATABASE_URL: str = "sqlite:///./storefront.db"

    # Supabase (Storage only)
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None

    # Service role key bypasses RLS (backend only)
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Client-side cart snapshot
    CART_COOKIE_NAME: str = "cart"
    CART_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 30

    GOOGLE_API_KEY: str | None = None

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
