"""Tenant maintenance router."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.security import require_tenant, AuthenticatedUser
from app.models.enums import LeaseStatus, MaintenanceStatus
from app.models.lease import Lease
from app.models.maintenance import MaintenanceRequest
from app.models.property import Property, Unit
from app.models.user import User
from app.schemas.base import ApiResponse
from app.schemas.maintenance import (
    MaintenanceRequestCreate,
    MaintenanceRequestResponse,
    MaintenanceUpdateResponse,
)
from app.services.maintenance import load_request, request_query
from app.services.notifications import NotificationService, get_notification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenant/maintenance", tags=["tenant-maintenance"])

LIST_UPDATES_LIMIT = 3


def _public_response(request: MaintenanceRequest, limit: Optional[int] = None) -> MaintenanceRequestResponse:
    """Serialize a request for its tenant: internal notes are never included."""
    response = MaintenanceRequestResponse.model_validate(request)
    public = [u for u in request.updates if u.is_public]
    if limit:
        public = public[:limit]
    response.updates = [MaintenanceUpdateResponse.model_validate(u) for u in public]
    return response


@router.get("", response_model=ApiResponse[List[MaintenanceRequestResponse]])
async def list_my_requests(
    status_filter: Optional[MaintenanceStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_tenant),
):
    """List the tenant's own requests, newest first."""
    query = request_query().where(MaintenanceRequest.tenant_id == current_user.db_user_id)
    if status_filter:
        query = query.where(MaintenanceRequest.status == status_filter)
    query = query.order_by(MaintenanceRequest.created_at.desc())

    result = await db.execute(query)
    requests = result.scalars().all()
    return ApiResponse(data=[_public_response(r, LIST_UPDATES_LIMIT) for r in requests])


@router.post("", response_model=ApiResponse[MaintenanceRequestResponse], status_code=status.HTTP_201_CREATED)
async def create_request(
    data: MaintenanceRequestCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_tenant),
    notifier: NotificationService = Depends(get_notification_service),
):
    """File a request against the unit on the tenant's active lease."""
    result = await db.execute(
        select(Lease)
        .options(
            selectinload(Lease.unit).selectinload(Unit.property).selectinload(Property.owner),
            selectinload(Lease.tenant),
        )
        .where(Lease.tenant_id == current_user.db_user_id, Lease.status == LeaseStatus.ACTIVE)
        .order_by(Lease.start_date.desc())
    )
    lease = result.scalars().first()
    if not lease:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No active lease found")

    payload = data.model_dump()
    payload["photo_urls"] = [str(url) for url in data.photo_urls]
    request = MaintenanceRequest(
        unit_id=lease.unit_id,
        tenant_id=current_user.db_user_id,
        status=MaintenanceStatus.SUBMITTED,
        **payload,
    )
    db.add(request)
    await db.commit()

    unit = lease.unit
    prop = unit.property
    tenant: User = lease.tenant
    await notifier.maintenance_submitted(request, unit, prop, tenant, prop.owner)
    await db.commit()

    logger.info(f"[MAINTENANCE] Request {request.id} submitted for unit {unit.id}")
    request = await load_request(db, request.id)
    return ApiResponse(
        data=_public_response(request),
        message="Maintenance request submitted successfully",
    )


@router.get("/{request_id}", response_model=ApiResponse[MaintenanceRequestResponse])
async def get_my_request(
    request_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_tenant),
):
    """Get one of the tenant's requests with its public updates."""
    request = await load_request(db, request_id)
    if not request:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Maintenance request not found")
    if request.tenant_id != current_user.db_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return ApiResponse(data=_public_response(request))
