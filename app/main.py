"""Strukture - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.database import engine
from app.core.env_validation import validate_environment
from app.core.errors import register_exception_handlers
from app.routers import (
    auth_router,
    properties_router,
    landlord_maintenance_router,
    tenant_maintenance_router,
    landlord_payments_router,
    tenant_payments_router,
    payment_methods_router,
    landlord_tenants_router,
    landlord_leases_router,
    tenant_lease_router,
    notifications_router,
    onboarding_router,
    webhooks_router,
)

# Hard-fails (exit 1) if required configuration is missing
validate_environment()

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"[API] {settings.app_name} starting ({settings.environment})")
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Property management for landlords and tenants: properties, leases, rent payments and maintenance.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# In production, wildcard (*) is blocked by env_validation.py
logger.info(f"[API] CORS configured with origins: {settings.cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(properties_router, prefix=settings.api_prefix)
app.include_router(landlord_maintenance_router, prefix=settings.api_prefix)
app.include_router(tenant_maintenance_router, prefix=settings.api_prefix)
app.include_router(landlord_payments_router, prefix=settings.api_prefix)
app.include_router(tenant_payments_router, prefix=settings.api_prefix)
app.include_router(payment_methods_router, prefix=settings.api_prefix)
app.include_router(landlord_tenants_router, prefix=settings.api_prefix)
app.include_router(landlord_leases_router, prefix=settings.api_prefix)
app.include_router(tenant_lease_router, prefix=settings.api_prefix)
app.include_router(notifications_router, prefix=settings.api_prefix)
app.include_router(onboarding_router, prefix=settings.api_prefix)
app.include_router(webhooks_router, prefix=settings.api_prefix)  # Stripe events


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs" if settings.debug else "Disabled in production",
    }
