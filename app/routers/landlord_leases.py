"""Landlord leases router: review, countersign, terminate and renew."""

import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.security import require_landlord, client_ip, AuthenticatedUser
from app.models.enums import AuditAction, LeaseStatus
from app.models.lease import Lease
from app.models.property import Property, Unit
from app.schemas.base import ApiResponse
from app.schemas.lease import (
    LeaseDetailResponse,
    LeaseReminderRequest,
    LeaseRenewRequest,
    LeaseTerminateRequest,
)
from app.services import leases as lease_service
from app.services.audit import AuditService
from app.services.notifications import NotificationService, get_notification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/landlord/leases", tags=["landlord-leases"])


def _lease_query():
    return select(Lease).options(
        selectinload(Lease.unit).selectinload(Unit.property).selectinload(Property.owner),
        selectinload(Lease.tenant),
    )


async def _load_lease(db: AsyncSession, lease_id: UUID) -> Optional[Lease]:
    result = await db.execute(
        _lease_query().where(Lease.id == lease_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_owned_lease(
    db: AsyncSession,
    lease_id: UUID,
    current_user: AuthenticatedUser,
) -> Lease:
    """404 if missing, 403 unless the lease's property is owned by the caller (or admin)."""
    lease = await _load_lease(db, lease_id)
    if not lease:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lease not found")
    if lease.unit.property.owner_id != current_user.db_user_id and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return lease


@router.get("", response_model=ApiResponse[List[LeaseDetailResponse]])
async def list_leases(
    status_filter: Optional[LeaseStatus] = Query(None, alias="status"),
    property_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Leases on the landlord's properties, latest ending first."""
    query = (
        _lease_query()
        .join(Unit, Lease.unit_id == Unit.id)
        .join(Property, Unit.property_id == Property.id)
    )
    if not current_user.is_admin:
        query = query.where(Property.owner_id == current_user.db_user_id)
    if status_filter:
        query = query.where(Lease.status == status_filter)
    if property_id:
        query = query.where(Property.id == property_id)
    query = query.order_by(Lease.end_date.desc())

    result = await db.execute(query)
    leases = result.scalars().all()
    return ApiResponse(data=[LeaseDetailResponse.model_validate(lease) for lease in leases])


@router.get("/{lease_id}", response_model=ApiResponse[LeaseDetailResponse])
async def get_lease(
    lease_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    lease = await get_owned_lease(db, lease_id, current_user)
    return ApiResponse(data=LeaseDetailResponse.model_validate(lease))


@router.post("/{lease_id}/activate", response_model=ApiResponse[LeaseDetailResponse])
async def activate_lease(
    lease_id: UUID,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Approve a submitted application: the lease goes ACTIVE and the unit OCCUPIED."""
    lease = await get_owned_lease(db, lease_id, current_user)
    try:
        lease_service.activate(lease)
    except lease_service.LeaseStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await AuditService(db).log_lease_change(
        action=AuditAction.LEASE_ACTIVATED,
        lease_id=lease.id,
        user_id=current_user.db_user_id,
        ip_address=client_ip(request),
    )
    await db.commit()

    unit = lease.unit
    await notifier.lease_activated(lease, unit, unit.property, lease.tenant, unit.property.owner)
    await db.commit()

    lease = await _load_lease(db, lease_id)
    return ApiResponse(data=LeaseDetailResponse.model_validate(lease), message="Lease activated successfully")


@router.post("/{lease_id}/terminate", response_model=ApiResponse[LeaseDetailResponse])
async def terminate_lease(
    lease_id: UUID,
    data: LeaseTerminateRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Terminate an active or pending lease; the unit returns to VACANT."""
    lease = await get_owned_lease(db, lease_id, current_user)
    try:
        lease_service.terminate(lease, data.reason, data.move_out_date)
    except lease_service.LeaseStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await AuditService(db).log_lease_change(
        action=AuditAction.LEASE_TERMINATED,
        lease_id=lease.id,
        user_id=current_user.db_user_id,
        details={"reason": data.reason},
        ip_address=client_ip(request),
    )
    await db.commit()

    lease = await _load_lease(db, lease_id)
    return ApiResponse(data=LeaseDetailResponse.model_validate(lease), message="Lease terminated successfully")


@router.post(
    "/{lease_id}/renew",
    response_model=ApiResponse[LeaseDetailResponse],
    status_code=status.HTTP_201_CREATED,
)
async def renew_lease(
    lease_id: UUID,
    data: LeaseRenewRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Renew an active lease; returns the new lease."""
    lease = await get_owned_lease(db, lease_id, current_user)
    try:
        successor = lease_service.renew(lease, data.end_date, data.monthly_rent_cents, data.notes)
    except lease_service.LeaseStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    db.add(successor)
    await db.flush()
    await AuditService(db).log_lease_change(
        action=AuditAction.LEASE_RENEWED,
        lease_id=lease.id,
        user_id=current_user.db_user_id,
        details={"renewed_lease_id": str(successor.id), "end_date": data.end_date.isoformat()},
        ip_address=client_ip(request),
    )
    await db.commit()

    successor = await _load_lease(db, successor.id)
    return ApiResponse(data=LeaseDetailResponse.model_validate(successor), message="Lease renewed successfully")


@router.post("/{lease_id}/reminders", response_model=ApiResponse[None])
async def send_reminder(
    lease_id: UUID,
    data: LeaseReminderRequest,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Send the tenant a rent due, late payment or lease expiring notice."""
    lease = await get_owned_lease(db, lease_id, current_user)
    if lease.status != LeaseStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Reminders can only be sent for active leases",
        )

    today = date.today()
    tenant = lease.tenant
    if data.kind == "RENT_DUE":
        await notifier.rent_due(lease, tenant, lease_service.next_due_date(lease, today))
    elif data.kind == "LATE_PAYMENT":
        days_late = (today - lease_service.last_due_date(lease, today)).days
        await notifier.late_payment(lease, tenant, data.amount_cents or lease.monthly_rent_cents, days_late)
    else:
        unit = lease.unit
        days_remaining = max((lease.end_date - today).days, 0)
        await notifier.lease_expiring(lease, unit, unit.property, tenant, unit.property.owner, days_remaining)
    await db.commit()

    logger.info(f"[LEASES] {data.kind} reminder sent for lease {lease.id}")
    return ApiResponse(message="Reminder sent")
