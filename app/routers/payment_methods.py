"""Tenant stored payment methods router."""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.encryption import mask_account_number
from app.core.security import require_tenant, AuthenticatedUser
from app.models.payment import StoredPaymentMethod
from app.models.user import User
from app.schemas.base import ApiResponse
from app.schemas.payment import PaymentMethodResponse, SetupIntentResponse
from app.services.payments import PaymentGateway, PaymentGatewayError, get_payment_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenant/payment-methods", tags=["payment-methods"])


def method_response(method: StoredPaymentMethod) -> PaymentMethodResponse:
    response = PaymentMethodResponse.model_validate(method)
    response.masked_number = mask_account_number(method.last4)
    return response


@router.get("", response_model=ApiResponse[List[PaymentMethodResponse]])
async def list_payment_methods(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_tenant),
):
    """Active stored methods, default first."""
    result = await db.execute(
        select(StoredPaymentMethod)
        .where(
            StoredPaymentMethod.user_id == current_user.db_user_id,
            StoredPaymentMethod.is_active.is_(True),
        )
        .order_by(StoredPaymentMethod.is_default.desc(), StoredPaymentMethod.created_at.desc())
    )
    methods = result.scalars().all()
    return ApiResponse(data=[method_response(m) for m in methods])


@router.post("", response_model=ApiResponse[SetupIntentResponse], status_code=status.HTTP_201_CREATED)
async def create_setup_intent(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_tenant),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """Start saving a new method; the browser confirms the SetupIntent."""
    user = await db.get(User, current_user.db_user_id)
    try:
        customer_id = await gateway.get_or_create_customer(user)
        intent = await gateway.create_setup_intent(customer_id)
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    if user.stripe_customer_id != customer_id:
        user.stripe_customer_id = customer_id
        await db.commit()

    return ApiResponse(data=SetupIntentResponse(client_secret=intent.client_secret))


@router.delete("/{method_id}", response_model=ApiResponse[None])
async def remove_payment_method(
    method_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_tenant),
):
    """Deactivate a stored method; the row is kept for payment history."""
    method = await db.get(StoredPaymentMethod, method_id)
    if not method or not method.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment method not found")
    if method.user_id != current_user.db_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    method.is_active = False
    method.is_default = False
    await db.commit()

    logger.info(f"[PAYMENTS] Payment method {method_id} deactivated")
    return ApiResponse(message="Payment method removed")
