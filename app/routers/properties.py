"""Landlord properties and units router."""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.security import require_landlord, AuthenticatedUser
from app.models.enums import AuditAction, OPEN_LEASE_STATUSES
from app.models.lease import Lease
from app.models.property import Property, Unit
from app.schemas.base import ApiResponse
from app.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    UnitCreate,
    UnitUpdate,
    UnitResponse,
)
from app.services.audit import AuditService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/landlord/properties", tags=["landlord-properties"])


def _property_response(prop: Property) -> PropertyResponse:
    response = PropertyResponse.model_validate(prop)
    response.unit_count = len(prop.units)
    return response


async def _load_property(db: AsyncSession, property_id: UUID) -> Property | None:
    result = await db.execute(
        select(Property)
        .options(selectinload(Property.units))
        .where(Property.id == property_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_owned_property(
    db: AsyncSession,
    property_id: UUID,
    current_user: AuthenticatedUser,
) -> Property:
    """Load a property, 404 if missing and 403 unless owned (or admin)."""
    prop = await _load_property(db, property_id)
    if not prop:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    if prop.owner_id != current_user.db_user_id and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return prop


async def _get_unit_in_property(db: AsyncSession, prop: Property, unit_id: UUID) -> Unit:
    unit = await db.get(Unit, unit_id)
    if not unit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unit not found")
    if unit.property_id != prop.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unit does not belong to this property",
        )
    return unit


async def _unit_number_taken(db: AsyncSession, property_id: UUID, unit_number: str) -> bool:
    result = await db.execute(
        select(Unit.id).where(Unit.property_id == property_id, Unit.unit_number == unit_number)
    )
    return result.first() is not None


@router.get("", response_model=ApiResponse[List[PropertyResponse]])
async def list_properties(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """List the landlord's properties, newest first."""
    result = await db.execute(
        select(Property)
        .options(selectinload(Property.units))
        .where(Property.owner_id == current_user.db_user_id)
        .order_by(Property.created_at.desc())
    )
    properties = result.scalars().all()
    return ApiResponse(data=[_property_response(p) for p in properties])


@router.post("", response_model=ApiResponse[PropertyResponse], status_code=status.HTTP_201_CREATED)
async def create_property(
    data: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Create a new property owned by the caller."""
    prop = Property(owner_id=current_user.db_user_id, units=[], **data.model_dump())
    db.add(prop)
    await db.commit()

    prop = await _load_property(db, prop.id)
    return ApiResponse(data=_property_response(prop), message="Property created successfully")


@router.get("/{property_id}", response_model=ApiResponse[PropertyResponse])
async def get_property(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Get a property with its units."""
    prop = await get_owned_property(db, property_id, current_user)
    return ApiResponse(data=_property_response(prop))


@router.put("/{property_id}", response_model=ApiResponse[PropertyResponse])
async def update_property(
    property_id: UUID,
    data: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Update a property."""
    prop = await get_owned_property(db, property_id, current_user)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(prop, field, value)

    await db.commit()

    prop = await _load_property(db, property_id)
    return ApiResponse(data=_property_response(prop), message="Property updated successfully")


@router.delete("/{property_id}", response_model=ApiResponse[None])
async def delete_property(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Delete a property; refused while any unit has an open lease."""
    prop = await get_owned_property(db, property_id, current_user)

    open_leases = await db.execute(
        select(func.count(Lease.id))
        .join(Unit, Lease.unit_id == Unit.id)
        .where(Unit.property_id == property_id, Lease.status.in_(OPEN_LEASE_STATUSES))
    )
    if open_leases.scalar_one() > 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete property with active leases. Please terminate all leases first.",
        )

    audit = AuditService(db)
    await audit.log_deletion(
        action=AuditAction.PROPERTY_DELETED,
        resource_type="property",
        resource_id=prop.id,
        user_id=current_user.db_user_id,
        details={"name": prop.name},
    )
    await db.delete(prop)
    await db.commit()

    logger.info(f"[PROPERTIES] Deleted property {property_id}")
    return ApiResponse(message="Property deleted successfully")


# --- Units ---

@router.get("/{property_id}/units", response_model=ApiResponse[List[UnitResponse]])
async def list_units(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """List all units for a property."""
    prop = await get_owned_property(db, property_id, current_user)
    return ApiResponse(data=[UnitResponse.model_validate(u) for u in prop.units])


@router.post(
    "/{property_id}/units",
    response_model=ApiResponse[UnitResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_unit(
    property_id: UUID,
    data: UnitCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Create a unit within a property; unit numbers are unique per property."""
    prop = await get_owned_property(db, property_id, current_user)

    if await _unit_number_taken(db, property_id, data.unit_number):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A unit with this number already exists",
        )

    unit = Unit(property_id=property_id, **data.model_dump())
    db.add(unit)
    prop.total_units = prop.total_units + 1
    await db.commit()
    await db.refresh(unit)

    return ApiResponse(data=UnitResponse.model_validate(unit), message="Unit created successfully")


@router.get("/{property_id}/units/{unit_id}", response_model=ApiResponse[UnitResponse])
async def get_unit(
    property_id: UUID,
    unit_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Get a unit by ID."""
    prop = await get_owned_property(db, property_id, current_user)
    unit = await _get_unit_in_property(db, prop, unit_id)
    return ApiResponse(data=UnitResponse.model_validate(unit))


@router.put("/{property_id}/units/{unit_id}", response_model=ApiResponse[UnitResponse])
async def update_unit(
    property_id: UUID,
    unit_id: UUID,
    data: UnitUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Update a unit."""
    prop = await get_owned_property(db, property_id, current_user)
    unit = await _get_unit_in_property(db, prop, unit_id)

    update_data = data.model_dump(exclude_unset=True)
    new_number = update_data.get("unit_number")
    if new_number and new_number != unit.unit_number:
        if await _unit_number_taken(db, property_id, new_number):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A unit with this number already exists",
            )

    for field, value in update_data.items():
        setattr(unit, field, value)

    await db.commit()
    await db.refresh(unit)

    return ApiResponse(data=UnitResponse.model_validate(unit), message="Unit updated successfully")


@router.delete("/{property_id}/units/{unit_id}", response_model=ApiResponse[None])
async def delete_unit(
    property_id: UUID,
    unit_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Delete a unit; refused while it has an open lease."""
    prop = await get_owned_property(db, property_id, current_user)
    unit = await _get_unit_in_property(db, prop, unit_id)

    open_leases = await db.execute(
        select(func.count(Lease.id)).where(
            Lease.unit_id == unit_id,
            Lease.status.in_(OPEN_LEASE_STATUSES),
        )
    )
    if open_leases.scalar_one() > 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete unit with active leases. Please terminate the lease first.",
        )

    audit = AuditService(db)
    await audit.log_deletion(
        action=AuditAction.UNIT_DELETED,
        resource_type="unit",
        resource_id=unit.id,
        user_id=current_user.db_user_id,
        details={"property_id": str(property_id), "unit_number": unit.unit_number},
    )
    await db.delete(unit)
    prop.total_units = max(prop.total_units - 1, 0)
    await db.commit()

    return ApiResponse(message="Unit deleted successfully")
