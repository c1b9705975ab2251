"""Apply gateway PaymentIntent outcomes to local Payment rows.

Shared by the Stripe webhook and the tenant status endpoint, so either may
arrive first. Completed and refunded payments are final and left untouched.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.enums import PaymentStatus
from app.models.lease import Lease
from app.models.payment import Payment
from app.models.property import Property, Unit
from app.services.notifications import NotificationService
from app.services.payments import IntentResult

logger = logging.getLogger(__name__)

FINAL_STATUSES = frozenset({PaymentStatus.COMPLETED, PaymentStatus.REFUNDED})

INTENT_STATUS_MAP = {
    "succeeded": PaymentStatus.COMPLETED,
    "processing": PaymentStatus.PROCESSING,
    "canceled": PaymentStatus.CANCELLED,
    "requires_payment_method": PaymentStatus.PENDING,
    "requires_confirmation": PaymentStatus.PENDING,
    "requires_action": PaymentStatus.PENDING,
}


async def find_payment_by_intent(db: AsyncSession, intent_id: str) -> Optional[Payment]:
    result = await db.execute(
        select(Payment)
        .options(
            selectinload(Payment.tenant),
            selectinload(Payment.lease)
            .selectinload(Lease.unit)
            .selectinload(Unit.property)
            .selectinload(Property.owner),
        )
        .where(Payment.stripe_payment_intent_id == intent_id)
    )
    return result.scalar_one_or_none()


async def apply_intent(
    db: AsyncSession,
    payment: Payment,
    intent: IntentResult,
    notifier: NotificationService,
    new_status: Optional[PaymentStatus] = None,
) -> bool:
    """Move payment to the status the intent reports.

    new_status overrides the mapping (webhook event types are more specific
    than the intent's own status). Returns True when the payment changed.
    Completion stamps processed_at and the charge id, then notifies tenant
    and landlord. Nothing is committed here.
    """
    if payment.status in FINAL_STATUSES:
        return False

    target = new_status or INTENT_STATUS_MAP.get(intent.status)
    if target is None or target == payment.status:
        return False

    payment.status = target
    if target == PaymentStatus.FAILED:
        payment.failure_reason = intent.failure_message or "Payment failed"
    if target == PaymentStatus.COMPLETED:
        payment.processed_at = datetime.utcnow()
        payment.stripe_charge_id = intent.latest_charge
        unit = payment.lease.unit
        prop = unit.property
        await notifier.payment_received(payment, unit, prop, payment.tenant, prop.owner)

    logger.info(f"[PAYMENTS] Payment {payment.id} -> {target.value}")
    return True
