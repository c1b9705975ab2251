"""Services for Strukture."""

from app.services.audit import AuditService
from app.services.maintenance import MaintenanceService, InvalidTransitionError
from app.services.mailer import EmailSender
from app.services.telegram import TelegramNotifier
from app.services.notifications import NotificationService, get_notification_service
from app.services.payments import PaymentGateway, PaymentGatewayError, get_payment_gateway

__all__ = [
    "AuditService",
    "MaintenanceService",
    "InvalidTransitionError",
    "EmailSender",
    "TelegramNotifier",
    "NotificationService",
    "get_notification_service",
    "PaymentGateway",
    "PaymentGatewayError",
    "get_payment_gateway",
]
