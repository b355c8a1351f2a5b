# artistconnect/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from artistconnect.core.config import get_settings
from artistconnect.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from artistconnect.models import client_storage as _client_storage_models  # noqa: F401

# Routers
from artistconnect.routers.cart import router as cart_router
from artistconnect.routers.checkout import router as checkout_router
from artistconnect.routers.payment_pages import router as payment_pages_router
from artistconnect.routers.admin_stripe import router as admin_stripe_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Create the client storage table.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("🔄 Startup: preparing client storage...")
    try:
        create_db_and_tables()
        logger.info("✅ Startup: client storage ready.")
    except Exception as e:
        logger.error(f"❌ Startup: client storage FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "ArtistConnect Storefront",
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(checkout_router, prefix=settings.API_V1_STR)
app.include_router(admin_stripe_router, prefix=settings.API_V1_STR)

# Payment return paths are fixed URLs handed to the payment provider.
app.include_router(payment_pages_router)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "artistconnect-storefront"}
