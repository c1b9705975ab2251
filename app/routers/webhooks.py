"""Stripe webhook receiver."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.enums import PaymentStatus
from app.models.payment import StoredPaymentMethod
from app.models.user import User
from app.schemas.base import ApiResponse
from app.services.notifications import NotificationService, get_notification_service
from app.services.payments import (
    PaymentGateway,
    PaymentGatewayError,
    WebhookSignatureError,
    get_payment_gateway,
    intent_result,
)
from app.services.settlement import apply_intent, find_payment_by_intent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

INTENT_EVENTS = {
    "payment_intent.succeeded": PaymentStatus.COMPLETED,
    "payment_intent.payment_failed": PaymentStatus.FAILED,
    "payment_intent.processing": PaymentStatus.PROCESSING,
}


async def _handle_intent_event(
    db: AsyncSession,
    obj: Any,
    new_status: PaymentStatus,
    notifier: NotificationService,
) -> None:
    intent = intent_result(obj)
    payment = await find_payment_by_intent(db, intent.id)
    if not payment:
        logger.warning(f"[WEBHOOK] No payment for intent {intent.id}")
        return
    if await apply_intent(db, payment, intent, notifier, new_status=new_status):
        await db.commit()


async def _handle_setup_succeeded(db: AsyncSession, obj: Any, gateway: PaymentGateway) -> None:
    payment_method_id = obj.get("payment_method")
    customer_id = obj.get("customer")
    if not payment_method_id or not customer_id:
        return

    result = await db.execute(select(User).where(User.stripe_customer_id == customer_id))
    user = result.scalar_one_or_none()
    if not user:
        logger.warning(f"[WEBHOOK] No user for customer {customer_id}")
        return

    existing = await db.execute(
        select(StoredPaymentMethod).where(StoredPaymentMethod.stripe_payment_method_id == payment_method_id)
    )
    if existing.scalar_one_or_none():
        return

    details = await gateway.retrieve_payment_method(payment_method_id)
    active_count = (
        await db.execute(
            select(func.count(StoredPaymentMethod.id)).where(
                StoredPaymentMethod.user_id == user.id,
                StoredPaymentMethod.is_active.is_(True),
            )
        )
    ).scalar_one()

    db.add(
        StoredPaymentMethod(
            user_id=user.id,
            stripe_payment_method_id=details.id,
            type=details.type,
            brand=details.brand,
            bank_name=details.bank_name,
            last4=details.last4,
            exp_month=details.exp_month,
            exp_year=details.exp_year,
            is_default=active_count == 0,
        )
    )
    await db.commit()
    logger.info(f"[WEBHOOK] Stored payment method for user {user.id}")


@router.post("/stripe", response_model=ApiResponse[None])
async def stripe_webhook(
    request: Request,
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Verify and apply a Stripe event. Unhandled event types are acknowledged."""
    signature = request.headers.get("stripe-signature")
    if not signature:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing signature")

    payload = await request.body()
    try:
        event = gateway.construct_event(payload, signature)
    except WebhookSignatureError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    event_type = event["type"]
    obj = event["data"]["object"]
    logger.info(f"[WEBHOOK] {event_type} {event.get('id')}")

    if event_type in INTENT_EVENTS:
        await _handle_intent_event(db, obj, INTENT_EVENTS[event_type], notifier)
    elif event_type == "setup_intent.succeeded":
        try:
            await _handle_setup_succeeded(db, obj, gateway)
        except PaymentGatewayError as e:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return ApiResponse(message="received")
