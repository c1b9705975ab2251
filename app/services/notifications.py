"""Notification fan-out: in-app rows, email and Telegram.

In-app notifications are added to the caller's session and persisted with
the caller's commit. Email and Telegram delivery never raise; failures are
logged by the channel and reported back as False.
"""

import logging
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.enums import NotificationCategory, NotificationChannel, MaintenanceStatus
from app.models.lease import Lease
from app.models.maintenance import MaintenanceRequest
from app.models.notification import Notification
from app.models.payment import Payment
from app.models.property import Property, Unit
from app.models.user import User
from app.services.formatting import format_currency, format_date, format_label
from app.services.mailer import EmailSender
from app.services.telegram import TelegramNotifier

logger = logging.getLogger(__name__)


class NotificationService:
    """Dispatches domain events to every configured channel."""

    def __init__(
        self,
        db: AsyncSession,
        email: Optional[EmailSender] = None,
        telegram: Optional[TelegramNotifier] = None,
    ):
        self.db = db
        self.email = email or EmailSender()
        self.telegram = telegram or TelegramNotifier()

    def create_in_app(
        self,
        user_id: UUID,
        category: NotificationCategory,
        title: str,
        message: str,
        action_url: Optional[str] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            channel=NotificationChannel.IN_APP,
            category=category,
            title=title,
            message=message,
            action_url=action_url,
            sent_at=datetime.utcnow(),
        )
        self.db.add(notification)
        return notification

    async def maintenance_submitted(
        self,
        request: MaintenanceRequest,
        unit: Unit,
        prop: Property,
        tenant: User,
        landlord: User,
    ) -> None:
        """Landlord: email, Telegram (if linked) and in-app."""
        await self.email.send_maintenance_submitted(
            to=landlord.email,
            landlord_name=landlord.full_name,
            tenant_name=tenant.full_name,
            property_name=prop.name,
            unit_number=unit.unit_number,
            title=request.title,
            description=request.description,
            category=request.category.value,
            priority=request.priority.value,
            request_id=str(request.id),
        )
        if landlord.telegram_chat_id:
            await self.telegram.send_maintenance_request(
                chat_id=landlord.telegram_chat_id,
                request_id=str(request.id),
                title=request.title,
                description=request.description,
                category=request.category.value,
                priority=request.priority.value,
                property_name=prop.name,
                unit_number=unit.unit_number,
                tenant_name=tenant.full_name,
                entry_permission=request.entry_permission,
            )
        self.create_in_app(
            user_id=landlord.id,
            category=NotificationCategory.MAINTENANCE_UPDATE,
            title="New Maintenance Request",
            message=(
                f"{tenant.full_name} submitted a {request.priority.value.lower()} priority "
                f"maintenance request: {request.title}"
            ),
            action_url=f"/landlord/maintenance/{request.id}",
        )
        logger.info(f"[NOTIFY] Maintenance {request.id} submitted, landlord {landlord.id} notified")

    async def maintenance_updated(
        self,
        request: MaintenanceRequest,
        tenant: User,
        new_status: MaintenanceStatus,
        message: str,
    ) -> None:
        """Tenant: email and in-app."""
        await self.email.send_maintenance_update(
            to=tenant.email,
            tenant_name=tenant.full_name,
            title=request.title,
            new_status=new_status.value,
            message=message,
            request_id=str(request.id),
        )
        self.create_in_app(
            user_id=tenant.id,
            category=NotificationCategory.MAINTENANCE_UPDATE,
            title="Maintenance Request Updated",
            message=f'Your maintenance request "{request.title}" has been updated to: {format_label(new_status.value)}',
            action_url=f"/tenant/maintenance/{request.id}",
        )

    async def payment_received(
        self,
        payment: Payment,
        unit: Unit,
        prop: Property,
        tenant: User,
        landlord: User,
    ) -> None:
        """Tenant confirmation plus landlord Telegram and in-app."""
        amount = format_currency(payment.amount_cents)
        await self.email.send_payment_confirmation(
            to=tenant.email,
            tenant_name=tenant.full_name,
            amount_cents=payment.amount_cents,
            property_name=prop.name,
            unit_number=unit.unit_number,
            payment_method=payment.method.value,
            transaction_id=payment.stripe_payment_intent_id or str(payment.id),
        )
        if landlord.telegram_chat_id:
            await self.telegram.send_payment_received(
                chat_id=landlord.telegram_chat_id,
                amount_cents=payment.amount_cents,
                payment_method=payment.method.value,
                property_name=prop.name,
                unit_number=unit.unit_number,
                tenant_name=tenant.full_name,
            )
        self.create_in_app(
            user_id=tenant.id,
            category=NotificationCategory.PAYMENT_RECEIVED,
            title="Payment Confirmed",
            message=f"Your payment of {amount} has been processed successfully.",
            action_url="/tenant/payments",
        )
        self.create_in_app(
            user_id=landlord.id,
            category=NotificationCategory.PAYMENT_RECEIVED,
            title="Payment Received",
            message=f"{tenant.full_name} paid {amount} for {prop.name} - Unit {unit.unit_number}",
            action_url="/landlord/payments",
        )

    async def lease_activated(
        self,
        lease: Lease,
        unit: Unit,
        prop: Property,
        tenant: User,
        landlord: User,
    ) -> None:
        """Welcome the tenant and tell the landlord's Telegram."""
        await self.email.send_welcome(
            to=tenant.email,
            tenant_name=tenant.full_name,
            property_name=prop.name,
            unit_number=unit.unit_number,
            move_in_date=lease.move_in_date or lease.start_date,
            monthly_rent_cents=lease.monthly_rent_cents,
        )
        if landlord.telegram_chat_id:
            await self.telegram.send_lease_signed(
                chat_id=landlord.telegram_chat_id,
                tenant_name=tenant.full_name,
                property_name=prop.name,
                unit_number=unit.unit_number,
                start_date=format_date(lease.start_date),
                end_date=format_date(lease.end_date),
                monthly_rent_cents=lease.monthly_rent_cents,
            )
        self.create_in_app(
            user_id=tenant.id,
            category=NotificationCategory.GENERAL,
            title="Welcome to Strukture!",
            message=f"Welcome to {prop.name}! Your tenant portal is ready to use.",
            action_url="/tenant/dashboard",
        )

    async def rent_due(self, lease: Lease, tenant: User, due_date: date) -> None:
        await self.email.send_rent_due_reminder(
            to=tenant.email,
            tenant_name=tenant.full_name,
            amount_cents=lease.monthly_rent_cents,
            due_date=due_date,
        )
        self.create_in_app(
            user_id=tenant.id,
            category=NotificationCategory.PAYMENT_REMINDER,
            title="Rent Due Reminder",
            message=(
                f"Your rent payment of {format_currency(lease.monthly_rent_cents)} "
                f"is due on {format_date(due_date)}."
            ),
            action_url="/tenant/payments/new",
        )

    async def late_payment(self, lease: Lease, tenant: User, amount_cents: int, days_late: int) -> None:
        await self.email.send_late_payment_notice(
            to=tenant.email,
            tenant_name=tenant.full_name,
            amount_cents=amount_cents,
            days_late=days_late,
            late_fee_cents=lease.late_fee_cents,
        )
        self.create_in_app(
            user_id=tenant.id,
            category=NotificationCategory.PAYMENT_REMINDER,
            title="Late Payment Notice",
            message=(
                f"Your rent payment is {days_late} days overdue. "
                "Please pay immediately to avoid additional fees."
            ),
            action_url="/tenant/payments/new",
        )

    async def lease_expiring(
        self,
        lease: Lease,
        unit: Unit,
        prop: Property,
        tenant: User,
        landlord: User,
        days_remaining: int,
    ) -> None:
        await self.email.send_lease_expiring(
            to=tenant.email,
            tenant_name=tenant.full_name,
            property_name=prop.name,
            unit_number=unit.unit_number,
            end_date=lease.end_date,
            days_remaining=days_remaining,
        )
        self.create_in_app(
            user_id=tenant.id,
            category=NotificationCategory.LEASE_EXPIRING,
            title="Lease Expiring Soon",
            message=(
                f"Your lease expires in {days_remaining} days. "
                "Please contact your property manager about renewal."
            ),
            action_url="/tenant/dashboard",
        )
        self.create_in_app(
            user_id=landlord.id,
            category=NotificationCategory.LEASE_EXPIRING,
            title="Lease Expiring Soon",
            message=(
                f"Lease for {tenant.full_name} at {prop.name} - Unit {unit.unit_number} "
                f"expires in {days_remaining} days."
            ),
            action_url=f"/landlord/tenants/{tenant.id}",
        )


def get_notification_service(db: AsyncSession = Depends(get_db)) -> NotificationService:
    """Request-scoped notification service sharing the request's session."""
    return NotificationService(db)
