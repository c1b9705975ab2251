"""Tenant onboarding router: browse vacant units and submit an application."""

import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.encryption import encrypt
from app.core.security import require_tenant, client_ip, AuthenticatedUser
from app.models.enums import LeaseStatus, PropertyStatus, UnitStatus, UserStatus
from app.models.lease import Lease
from app.models.property import Property, Unit
from app.models.user import User
from app.schemas.base import ApiResponse
from app.schemas.onboarding import OnboardingSubmission, OnboardingResult
from app.schemas.property import AvailableUnitResponse
from app.services.audit import AuditService
from app.services.leases import add_months

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])

RENT_DUE_DAY = 1
GRACE_PERIOD_DAYS = 5


@router.get("/available-units", response_model=ApiResponse[List[AvailableUnitResponse]])
async def list_available_units(db: AsyncSession = Depends(get_db)):
    """Vacant units on active properties, by property name then unit number."""
    result = await db.execute(
        select(Unit)
        .join(Property, Unit.property_id == Property.id)
        .options(selectinload(Unit.property))
        .where(Unit.status == UnitStatus.VACANT, Property.status == PropertyStatus.ACTIVE)
        .order_by(Property.name.asc(), Unit.unit_number.asc())
    )
    units = result.scalars().all()
    return ApiResponse(data=[AvailableUnitResponse.model_validate(u) for u in units])


@router.post("/submit", response_model=ApiResponse[OnboardingResult], status_code=status.HTTP_201_CREATED)
async def submit_application(
    data: OnboardingSubmission,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_tenant),
):
    """Submit the onboarding application.

    Profile update, pending lease, unit reservation and audit entry are
    committed together. The unit is reserved with a conditional update so
    two applicants cannot both claim it.
    """
    unit = await db.get(Unit, data.unit_id)
    if not unit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unit not found")

    reserved = await db.execute(
        update(Unit)
        .where(Unit.id == unit.id, Unit.status == UnitStatus.VACANT)
        .values(status=UnitStatus.RESERVED)
    )
    if reserved.rowcount == 0:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="This unit is no longer available")

    ip_address = client_ip(request)
    now = datetime.utcnow()

    user = await db.get(User, current_user.db_user_id)
    user.first_name = data.first_name
    user.last_name = data.last_name
    user.phone = data.phone
    user.date_of_birth = data.date_of_birth
    user.ssn_encrypted = encrypt(data.ssn_last4)
    user.emergency_contact_name = data.emergency_contact_name
    user.emergency_contact_phone = data.emergency_contact_phone
    user.emergency_contact_relation = data.emergency_contact_relation
    user.employment_status = data.employment_status
    user.employer_name = data.employer_name
    user.employer_phone = data.employer_phone
    user.monthly_income_cents = data.monthly_income_cents
    user.status = UserStatus.ACTIVE

    lease = Lease(
        unit_id=unit.id,
        tenant_id=user.id,
        status=LeaseStatus.PENDING_SIGNATURE,
        start_date=data.move_in_date,
        end_date=add_months(data.move_in_date, int(data.lease_term)),
        move_in_date=data.move_in_date,
        monthly_rent_cents=unit.monthly_rent_cents,
        deposit_amount_cents=unit.deposit_amount_cents,
        rent_due_day=RENT_DUE_DAY,
        grace_period_days=GRACE_PERIOD_DAYS,
        tenant_signature=data.signature,
        tenant_signed_at=now,
        tenant_signed_ip=ip_address,
    )
    db.add(lease)
    await db.flush()

    await AuditService(db).log_onboarding_completed(
        lease_id=lease.id,
        user_id=user.id,
        unit_id=unit.id,
        details={"move_in_date": data.move_in_date.isoformat(), "lease_term": data.lease_term},
        ip_address=ip_address,
        user_agent=request.headers.get("user-agent"),
    )
    await db.commit()

    logger.info(f"[ONBOARDING] Application {lease.id} submitted by {user.id} for unit {unit.id}")
    return ApiResponse(
        data=OnboardingResult(lease_id=lease.id),
        message="Application submitted successfully. Awaiting landlord approval.",
    )
