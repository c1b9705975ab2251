"""Landlord tenant roster router."""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import get_settings
from app.core.database import get_db
from app.core.encryption import decrypt, mask_ssn, DecryptionError
from app.core.security import require_landlord, AuthenticatedUser
from app.models.enums import LeaseStatus, PaymentStatus
from app.models.lease import Lease
from app.models.maintenance import MaintenanceRequest
from app.models.property import Property, Unit
from app.models.user import User
from app.schemas.base import ApiResponse
from app.schemas.lease import LeaseDetailResponse
from app.schemas.payment import PaymentResponse
from app.schemas.tenant import (
    EmergencyContact,
    PaymentSummary,
    TenantDetailResponse,
    TenantLeaseSummary,
    TenantLeaseWithPayments,
    TenantListItem,
    TenantListResponse,
    TenantMaintenanceSummary,
    TenantRosterSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/landlord/tenants", tags=["landlord-tenants"])

RECENT_PAYMENTS_LIMIT = 10
RECENT_REQUESTS_LIMIT = 5


def _landlord_leases_query(current_user: AuthenticatedUser):
    query = (
        select(Lease)
        .join(Unit, Lease.unit_id == Unit.id)
        .join(Property, Unit.property_id == Property.id)
        .options(
            selectinload(Lease.unit).selectinload(Unit.property),
            selectinload(Lease.tenant),
        )
    )
    if not current_user.is_admin:
        query = query.where(Property.owner_id == current_user.db_user_id)
    return query


def is_expiring(lease: Lease, today: date, window_days: int) -> bool:
    return lease.status == LeaseStatus.ACTIVE and (lease.end_date - today).days <= window_days


def _masked_ssn(user: User) -> Optional[str]:
    if not user.ssn_encrypted:
        return None
    try:
        return mask_ssn(decrypt(user.ssn_encrypted))
    except DecryptionError:
        logger.warning(f"[TENANTS] Stored SSN for {user.id} could not be decrypted")
        return None


@router.get("", response_model=ApiResponse[TenantListResponse])
async def list_tenants(
    property_id: Optional[UUID] = None,
    lease_status: Optional[LeaseStatus] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Tenants holding any lease on the landlord's properties, grouped per tenant."""
    query = _landlord_leases_query(current_user)
    if property_id:
        query = query.where(Property.id == property_id)
    if lease_status:
        query = query.where(Lease.status == lease_status)
    query = query.order_by(Lease.status.asc(), Lease.end_date.desc())

    result = await db.execute(query)
    leases = result.scalars().all()

    tenants: dict[UUID, TenantListItem] = {}
    active_ids: set[UUID] = set()
    for lease in leases:
        tenant = lease.tenant
        if tenant.id not in tenants:
            tenants[tenant.id] = TenantListItem(
                id=tenant.id,
                email=tenant.email,
                first_name=tenant.first_name,
                last_name=tenant.last_name,
                phone=tenant.phone,
                status=tenant.status,
                leases=[],
            )
        tenants[tenant.id].leases.append(
            TenantLeaseSummary(
                id=lease.id,
                status=lease.status,
                start_date=lease.start_date,
                end_date=lease.end_date,
                monthly_rent_cents=lease.monthly_rent_cents,
                unit_id=lease.unit_id,
                unit_number=lease.unit.unit_number,
                property_id=lease.unit.property_id,
                property_name=lease.unit.property.name,
            )
        )
        if lease.status == LeaseStatus.ACTIVE:
            active_ids.add(tenant.id)

    today = date.today()
    window = get_settings().lease_expiring_window_days
    summary = TenantRosterSummary(
        total=len(tenants),
        active=len(active_ids),
        expiring_leases=sum(1 for lease in leases if is_expiring(lease, today, window)),
    )
    return ApiResponse(data=TenantListResponse(tenants=list(tenants.values()), summary=summary))


@router.get("/{tenant_id}", response_model=ApiResponse[TenantDetailResponse])
async def get_tenant(
    tenant_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Tenant profile with their leases, payments and requests on this landlord's properties."""
    tenant = await db.get(User, tenant_id)
    if not tenant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")

    result = await db.execute(
        _landlord_leases_query(current_user)
        .options(selectinload(Lease.payments))
        .where(Lease.tenant_id == tenant_id)
        .order_by(Lease.start_date.desc())
    )
    leases = result.scalars().all()
    # A tenant with no lease here is not this landlord's to see
    if not leases:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")

    requests_query = (
        select(MaintenanceRequest)
        .join(Unit, MaintenanceRequest.unit_id == Unit.id)
        .join(Property, Unit.property_id == Property.id)
        .where(MaintenanceRequest.tenant_id == tenant_id)
        .order_by(MaintenanceRequest.created_at.desc())
        .limit(RECENT_REQUESTS_LIMIT)
    )
    if not current_user.is_admin:
        requests_query = requests_query.where(Property.owner_id == current_user.db_user_id)
    requests = (await db.execute(requests_query)).scalars().all()

    lease_items = []
    recent_payments = []
    for lease in leases:
        payments = lease.payments[:RECENT_PAYMENTS_LIMIT]
        recent_payments.extend(payments)
        lease_items.append(
            TenantLeaseWithPayments(
                **LeaseDetailResponse.model_validate(lease).model_dump(),
                payments=[PaymentResponse.model_validate(p) for p in payments],
            )
        )

    today = date.today()
    payment_summary = PaymentSummary(
        total_paid_cents=sum(p.amount_cents for p in recent_payments if p.status == PaymentStatus.COMPLETED),
        pending_payments=sum(1 for p in recent_payments if p.status == PaymentStatus.PENDING),
        late_payments=sum(
            1
            for p in recent_payments
            if p.status == PaymentStatus.PENDING and p.due_date and p.due_date < today
        ),
    )

    return ApiResponse(
        data=TenantDetailResponse(
            id=tenant.id,
            email=tenant.email,
            first_name=tenant.first_name,
            last_name=tenant.last_name,
            phone=tenant.phone,
            status=tenant.status,
            date_of_birth=tenant.date_of_birth,
            ssn_masked=_masked_ssn(tenant),
            employment_status=tenant.employment_status,
            employer_name=tenant.employer_name,
            monthly_income_cents=tenant.monthly_income_cents,
            emergency_contact=EmergencyContact(
                name=tenant.emergency_contact_name,
                phone=tenant.emergency_contact_phone,
                relation=tenant.emergency_contact_relation,
            ),
            leases=lease_items,
            maintenance_requests=[TenantMaintenanceSummary.model_validate(r) for r in requests],
            payment_summary=payment_summary,
            created_at=tenant.created_at,
        )
    )
