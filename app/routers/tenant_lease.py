"""Tenant lease router."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.security import require_tenant, AuthenticatedUser
from app.models.enums import LeaseStatus
from app.models.lease import Lease
from app.models.property import Unit
from app.schemas.base import ApiResponse
from app.schemas.lease import LeaseDetailResponse

router = APIRouter(prefix="/tenant/lease", tags=["tenant-lease"])


@router.get("", response_model=ApiResponse[Optional[LeaseDetailResponse]])
async def get_my_lease(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_tenant),
):
    """The tenant's active lease with unit and property, or null when there is none."""
    result = await db.execute(
        select(Lease)
        .options(selectinload(Lease.unit).selectinload(Unit.property))
        .where(Lease.tenant_id == current_user.db_user_id, Lease.status == LeaseStatus.ACTIVE)
        .order_by(Lease.start_date.desc())
    )
    lease = result.scalars().first()
    return ApiResponse(data=LeaseDetailResponse.model_validate(lease) if lease else None)
