# artistconnect/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key, used for RPC calls on behalf of the caller)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - DATABASE_URL (client storage; defaults to a local SQLite file)
      - PUBLIC_BASE_URL (origin used for payment return URLs when the
        service sits behind a proxy that rewrites Host)
    """

    PROJECT_NAME: str = "ArtistConnect"
    API_V1_STR: str = "/api/v1"

    # Supabase (Remote Commerce API + identity)
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # JWT verification
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Client-side durable storage
    DATABASE_URL: str = "sqlite:///./artistconnect.db"
    CART_STORAGE_KEY: str = "artist-connect-cart"
    PAYMENT_CONTEXT_KEY: str = "paymentContext"
    PROFILE_COOKIE_NAME: str = "ac_profile"
    PROFILE_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 365

    # Checkout
    CHECKOUT_CURRENCY: str = "USD"
    PUBLIC_BASE_URL: str | None = None

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
