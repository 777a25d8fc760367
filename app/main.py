"""
rPP Admin Console — FastAPI application entry point.

Configures the app, middleware, and registers all API routers.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import admin, auth, chat, chatlead, kyc, products
from app.config import settings
from app.core.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    from app.redis_client import redis

    yield

    # Shutdown: close connections
    await redis.aclose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Admin console for the recycled-plastic marketplace: KYC review, "
                "product approval and platform statistics.",
    version="0.1.0",
    lifespan=lifespan,
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routers ---
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(admin.router, prefix="/api/v1", tags=["Dashboard"])
app.include_router(kyc.router, prefix="/api/v1/kyc", tags=["KYC"])
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(chat.router, prefix="/api/v1/chat", tags=["Chat Assistant"])
app.include_router(chatlead.router, prefix="/api", tags=["Chat Leads"])


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": "0.1.0",
    }
