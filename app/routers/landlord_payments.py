"""Landlord payments router."""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.security import require_landlord, AuthenticatedUser
from app.models.enums import AuditAction, PaymentStatus
from app.models.lease import Lease
from app.models.payment import Payment
from app.models.property import Property, Unit
from app.schemas.base import ApiResponse
from app.schemas.payment import ManualPaymentCreate, PaymentResponse, RefundRequest
from app.services.audit import AuditService
from app.services.payments import PaymentGateway, PaymentGatewayError, get_payment_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/landlord/payments", tags=["landlord-payments"])


def _owned_payments_query(current_user: AuthenticatedUser):
    query = (
        select(Payment)
        .join(Lease, Payment.lease_id == Lease.id)
        .join(Unit, Lease.unit_id == Unit.id)
        .join(Property, Unit.property_id == Property.id)
    )
    if not current_user.is_admin:
        query = query.where(Property.owner_id == current_user.db_user_id)
    return query


@router.get("", response_model=ApiResponse[List[PaymentResponse]])
async def list_payments(
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    property_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """List payments on the landlord's properties, newest first."""
    query = _owned_payments_query(current_user)
    if status_filter:
        query = query.where(Payment.status == status_filter)
    if property_id:
        query = query.where(Property.id == property_id)
    query = query.order_by(Payment.created_at.desc())

    result = await db.execute(query)
    payments = result.scalars().all()
    return ApiResponse(data=[PaymentResponse.model_validate(p) for p in payments])


@router.post("", response_model=ApiResponse[PaymentResponse], status_code=status.HTTP_201_CREATED)
async def record_manual_payment(
    data: ManualPaymentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Record a cashier's check, cash or other offline payment as completed."""
    result = await db.execute(
        select(Lease)
        .options(selectinload(Lease.unit).selectinload(Unit.property))
        .where(Lease.id == data.lease_id)
    )
    lease = result.scalar_one_or_none()
    if not lease:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lease not found")
    if lease.unit.property.owner_id != current_user.db_user_id and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    if lease.tenant_id != data.tenant_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Tenant does not hold this lease",
        )

    payment = Payment(
        **data.model_dump(),
        status=PaymentStatus.COMPLETED,
        processed_at=datetime.utcnow(),
        received_by_id=current_user.db_user_id,
    )
    db.add(payment)
    await db.flush()

    await AuditService(db).log_payment(
        action=AuditAction.PAYMENT_RECORDED,
        payment_id=payment.id,
        user_id=current_user.db_user_id,
        amount_cents=payment.amount_cents,
        details={"method": payment.method.value},
    )
    await db.commit()
    await db.refresh(payment)

    logger.info(f"[PAYMENTS] Manual {payment.method.value} payment {payment.id} recorded")
    return ApiResponse(data=PaymentResponse.model_validate(payment), message="Payment recorded successfully")


@router.post("/{payment_id}/refund", response_model=ApiResponse[PaymentResponse])
async def refund_payment(
    payment_id: UUID,
    data: RefundRequest,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """Refund a completed payment, through the gateway when it was paid online."""
    result = await db.execute(_owned_payments_query(current_user).where(Payment.id == payment_id))
    payment = result.scalar_one_or_none()
    if not payment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    if payment.status != PaymentStatus.COMPLETED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only completed payments can be refunded",
        )

    payment.status = PaymentStatus.REFUNDED
    if data.reason:
        payment.notes = f"{payment.notes}\nRefund: {data.reason}" if payment.notes else f"Refund: {data.reason}"

    # The audit write flushes, so local rows hit the database before money moves
    entry = await AuditService(db).log_payment(
        action=AuditAction.PAYMENT_REFUNDED,
        payment_id=payment.id,
        user_id=current_user.db_user_id,
        amount_cents=payment.amount_cents,
        details={"refund_id": None, "reason": data.reason},
    )

    refund_id = None
    if payment.stripe_payment_intent_id:
        try:
            refund_id = await gateway.refund(payment.stripe_payment_intent_id)
        except PaymentGatewayError as e:
            await db.rollback()
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
        entry.details = {**entry.details, "refund_id": refund_id}

    try:
        await db.commit()
    except SQLAlchemyError:
        logger.error(f"[PAYMENTS] Refund {refund_id} issued for payment {payment.id} but not recorded")
        raise
    await db.refresh(payment)

    logger.info(f"[PAYMENTS] Payment {payment.id} refunded")
    return ApiResponse(data=PaymentResponse.model_validate(payment), message="Payment refunded successfully")
