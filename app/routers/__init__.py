"""API Routers for Strukture."""

from app.routers.auth import router as auth_router
from app.routers.properties import router as properties_router
from app.routers.landlord_maintenance import router as landlord_maintenance_router
from app.routers.tenant_maintenance import router as tenant_maintenance_router
from app.routers.landlord_payments import router as landlord_payments_router
from app.routers.tenant_payments import router as tenant_payments_router
from app.routers.payment_methods import router as payment_methods_router
from app.routers.landlord_tenants import router as landlord_tenants_router
from app.routers.landlord_leases import router as landlord_leases_router
from app.routers.tenant_lease import router as tenant_lease_router
from app.routers.notifications import router as notifications_router
from app.routers.onboarding import router as onboarding_router
from app.routers.webhooks import router as webhooks_router

__all__ = [
    "auth_router",
    "properties_router",
    "landlord_maintenance_router",
    "tenant_maintenance_router",
    "landlord_payments_router",
    "tenant_payments_router",
    "payment_methods_router",
    "landlord_tenants_router",
    "landlord_leases_router",
    "tenant_lease_router",
    "notifications_router",
    "onboarding_router",
    "webhooks_router",
]
