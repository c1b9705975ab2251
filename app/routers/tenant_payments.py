"""Tenant payments router."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import require_tenant, AuthenticatedUser
from app.models.enums import PaymentStatus
from app.models.lease import Lease
from app.models.payment import Payment
from app.models.user import User
from app.schemas.base import ApiResponse
from app.schemas.payment import PaymentCreate, PaymentResponse, PaymentIntentResponse
from app.services.notifications import NotificationService, get_notification_service
from app.services.payments import PaymentGateway, PaymentGatewayError, get_payment_gateway
from app.services.settlement import apply_intent, find_payment_by_intent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenant/payments", tags=["tenant-payments"])


@router.get("", response_model=ApiResponse[List[PaymentResponse]])
async def list_my_payments(
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    lease_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_tenant),
):
    """List the tenant's own payments, newest first."""
    query = select(Payment).where(Payment.tenant_id == current_user.db_user_id)
    if status_filter:
        query = query.where(Payment.status == status_filter)
    if lease_id:
        query = query.where(Payment.lease_id == lease_id)
    query = query.order_by(Payment.created_at.desc())

    result = await db.execute(query)
    payments = result.scalars().all()
    return ApiResponse(data=[PaymentResponse.model_validate(p) for p in payments])


@router.post("", response_model=ApiResponse[PaymentIntentResponse], status_code=status.HTTP_201_CREATED)
async def create_payment(
    data: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_tenant),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """Start an online payment: a pending Payment backed by a gateway PaymentIntent."""
    lease = await db.get(Lease, data.lease_id)
    if not lease:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lease not found")
    if lease.tenant_id != current_user.db_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    user = await db.get(User, current_user.db_user_id)
    try:
        customer_id = await gateway.get_or_create_customer(user)
        intent = await gateway.create_payment_intent(
            amount_cents=data.amount_cents,
            customer_id=customer_id,
            metadata={
                "lease_id": str(lease.id),
                "tenant_id": str(user.id),
                "payment_type": data.type.value,
            },
        )
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    user.stripe_customer_id = customer_id
    payment = Payment(
        **data.model_dump(),
        tenant_id=user.id,
        status=PaymentStatus.PENDING,
        stripe_payment_intent_id=intent.id,
    )
    db.add(payment)
    await db.commit()
    await db.refresh(payment)

    logger.info(f"[PAYMENTS] Intent {intent.id} created for payment {payment.id}")
    return ApiResponse(
        data=PaymentIntentResponse(
            payment=PaymentResponse.model_validate(payment),
            client_secret=intent.client_secret,
        ),
        message="Payment initiated",
    )


@router.get("/status", response_model=ApiResponse[PaymentResponse])
async def get_payment_status(
    payment_intent: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_tenant),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Refresh a payment from the gateway after the browser redirect."""
    payment = await find_payment_by_intent(db, payment_intent)
    if not payment or payment.tenant_id != current_user.db_user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")

    try:
        intent = await gateway.retrieve_payment_intent(payment_intent)
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    if await apply_intent(db, payment, intent, notifier):
        await db.commit()
        await db.refresh(payment)

    return ApiResponse(data=PaymentResponse.model_validate(payment))
