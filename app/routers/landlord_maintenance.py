"""Landlord maintenance router."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import case
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import require_landlord, AuthenticatedUser
from app.models.enums import MaintenanceStatus, MaintenancePriority
from app.models.maintenance import MaintenanceRequest
from app.models.property import Property, Unit
from app.models.user import User
from app.schemas.base import ApiResponse
from app.schemas.maintenance import (
    MaintenanceRequestUpdate,
    MaintenanceUpdateCreate,
    MaintenanceRequestResponse,
    MaintenanceUpdateResponse,
)
from app.services.maintenance import (
    InvalidTransitionError,
    MaintenanceService,
    load_request,
    request_query,
)
from app.services.notifications import NotificationService, get_notification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/landlord/maintenance", tags=["landlord-maintenance"])

LIST_UPDATES_LIMIT = 5

PRIORITY_RANK = case(
    {
        MaintenancePriority.EMERGENCY: 4,
        MaintenancePriority.HIGH: 3,
        MaintenancePriority.MEDIUM: 2,
        MaintenancePriority.LOW: 1,
    },
    value=MaintenanceRequest.priority,
    else_=0,
)


def _response(request: MaintenanceRequest, limit: Optional[int] = None) -> MaintenanceRequestResponse:
    response = MaintenanceRequestResponse.model_validate(request)
    updates = request.updates[:limit] if limit else request.updates
    response.updates = [MaintenanceUpdateResponse.model_validate(u) for u in updates]
    return response


async def get_owned_request(
    db: AsyncSession,
    request_id: UUID,
    current_user: AuthenticatedUser,
) -> MaintenanceRequest:
    """404 if missing, 403 unless the request's property is owned by the caller (or admin)."""
    request = await load_request(db, request_id)
    if not request:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Maintenance request not found")
    if request.unit.property.owner_id != current_user.db_user_id and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return request


@router.get("", response_model=ApiResponse[List[MaintenanceRequestResponse]])
async def list_maintenance_requests(
    status_filter: Optional[MaintenanceStatus] = Query(None, alias="status"),
    priority: Optional[MaintenancePriority] = None,
    property_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """List requests on the landlord's properties, most urgent then newest first."""
    query = (
        request_query()
        .join(Unit, MaintenanceRequest.unit_id == Unit.id)
        .join(Property, Unit.property_id == Property.id)
    )
    if not current_user.is_admin:
        query = query.where(Property.owner_id == current_user.db_user_id)
    if status_filter:
        query = query.where(MaintenanceRequest.status == status_filter)
    if priority:
        query = query.where(MaintenanceRequest.priority == priority)
    if property_id:
        query = query.where(Property.id == property_id)

    query = query.order_by(PRIORITY_RANK.desc(), MaintenanceRequest.created_at.desc())

    result = await db.execute(query)
    requests = result.scalars().all()
    return ApiResponse(data=[_response(r, LIST_UPDATES_LIMIT) for r in requests])


@router.get("/{request_id}", response_model=ApiResponse[MaintenanceRequestResponse])
async def get_maintenance_request(
    request_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Get a request with every update, internal notes included."""
    request = await get_owned_request(db, request_id, current_user)
    return ApiResponse(data=_response(request))


@router.put("/{request_id}", response_model=ApiResponse[MaintenanceRequestResponse])
async def update_maintenance_request(
    request_id: UUID,
    data: MaintenanceRequestUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Update request fields; a status change is logged and the tenant notified."""
    request = await get_owned_request(db, request_id, current_user)

    update_data = data.model_dump(exclude_unset=True)
    new_status = update_data.pop("status", None)

    if update_data.get("assigned_to_id") and not await db.get(User, update_data["assigned_to_id"]):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Assignee not found")

    for field, value in update_data.items():
        setattr(request, field, value)

    entry = None
    if new_status is not None:
        try:
            entry = MaintenanceService(db).change_status(request, new_status, current_user.db_user_id)
        except InvalidTransitionError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await db.commit()

    if entry is not None:
        await notifier.maintenance_updated(request, request.tenant, new_status, entry.message)
        await db.commit()

    request = await load_request(db, request_id)
    return ApiResponse(data=_response(request), message="Maintenance request updated successfully")


@router.post(
    "/{request_id}/updates",
    response_model=ApiResponse[MaintenanceUpdateResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_maintenance_update(
    request_id: UUID,
    data: MaintenanceUpdateCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Post a comment (public or internal), optionally moving the status."""
    request = await get_owned_request(db, request_id, current_user)
    previous_status = request.status

    try:
        entry = MaintenanceService(db).add_update(
            request,
            actor_id=current_user.db_user_id,
            message=data.message,
            new_status=data.new_status,
            is_public=data.is_public,
            photo_urls=[str(url) for url in data.photo_urls],
        )
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await db.commit()
    await db.refresh(entry)

    if data.is_public or request.status != previous_status:
        await notifier.maintenance_updated(request, request.tenant, request.status, data.message)
        await db.commit()

    return ApiResponse(data=MaintenanceUpdateResponse.model_validate(entry), message="Update added successfully")
