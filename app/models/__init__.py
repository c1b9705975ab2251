"""SQLAlchemy models for Strukture."""

from app.models.user import User
from app.models.property import Property, Unit
from app.models.lease import Lease
from app.models.payment import Payment, StoredPaymentMethod
from app.models.maintenance import MaintenanceRequest, MaintenanceUpdate
from app.models.notification import Notification
from app.models.audit import AuditLog

__all__ = [
    "User",
    "Property",
    "Unit",
    "Lease",
    "Payment",
    "StoredPaymentMethod",
    "MaintenanceRequest",
    "MaintenanceUpdate",
    "Notification",
    "AuditLog",
]
