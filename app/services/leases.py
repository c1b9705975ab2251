"""Lease state changes and rent calendar helpers.

Functions here mutate loaded ORM objects (lease, its unit) and leave the
commit to the caller, like MaintenanceService.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from app.models.enums import LeaseStatus, UnitStatus, OPEN_LEASE_STATUSES
from app.models.lease import Lease

logger = logging.getLogger(__name__)


class LeaseStateError(Exception):
    """Raised when a lease action does not apply to the lease's current status."""


def add_months(start: date, months: int) -> date:
    """Same day `months` later, clamped to the end of a shorter month."""
    return start + relativedelta(months=months)


def next_due_date(lease: Lease, today: date) -> date:
    """The next rent due date on or after today."""
    due = today + relativedelta(day=lease.rent_due_day)
    if due < today:
        due = today + relativedelta(months=1, day=lease.rent_due_day)
    return due


def last_due_date(lease: Lease, today: date) -> date:
    """The most recent rent due date on or before today."""
    due = today + relativedelta(day=lease.rent_due_day)
    if due > today:
        due = today + relativedelta(months=-1, day=lease.rent_due_day)
    return due


def activate(lease: Lease) -> None:
    """Countersign a pending lease; the unit becomes occupied."""
    if lease.status != LeaseStatus.PENDING_SIGNATURE:
        raise LeaseStateError("Only leases awaiting signature can be activated")

    lease.status = LeaseStatus.ACTIVE
    lease.landlord_signed_at = datetime.utcnow()
    if lease.move_in_date is None:
        lease.move_in_date = lease.start_date
    lease.unit.status = UnitStatus.OCCUPIED
    logger.info(f"[LEASES] Lease {lease.id} activated")


def terminate(lease: Lease, reason: Optional[str], move_out_date: Optional[date]) -> None:
    """End an open lease early; the unit is released."""
    if lease.status not in OPEN_LEASE_STATUSES:
        raise LeaseStateError("Only active or pending leases can be terminated")

    lease.status = LeaseStatus.TERMINATED
    lease.terminated_at = datetime.utcnow()
    lease.termination_reason = reason
    lease.move_out_date = move_out_date or date.today()
    lease.unit.status = UnitStatus.VACANT
    logger.info(f"[LEASES] Lease {lease.id} terminated")


def renew(
    lease: Lease,
    end_date: date,
    monthly_rent_cents: Optional[int] = None,
    notes: Optional[str] = None,
) -> Lease:
    """Close an active lease as RENEWED and return its successor.

    The successor starts the day after the old end date, keeps the unit,
    tenant and terms, and is ACTIVE immediately. The caller adds it to the session.
    """
    if lease.status != LeaseStatus.ACTIVE:
        raise LeaseStateError("Only active leases can be renewed")

    start_date = lease.end_date + timedelta(days=1)
    if end_date <= start_date:
        raise LeaseStateError("Renewal must end after the current lease")

    lease.status = LeaseStatus.RENEWED
    successor = Lease(
        unit_id=lease.unit_id,
        tenant_id=lease.tenant_id,
        renewed_from_id=lease.id,
        status=LeaseStatus.ACTIVE,
        start_date=start_date,
        end_date=end_date,
        move_in_date=lease.move_in_date,
        monthly_rent_cents=monthly_rent_cents if monthly_rent_cents is not None else lease.monthly_rent_cents,
        deposit_amount_cents=lease.deposit_amount_cents,
        late_fee_cents=lease.late_fee_cents,
        rent_due_day=lease.rent_due_day,
        grace_period_days=lease.grace_period_days,
        landlord_signed_at=datetime.utcnow(),
        notes=notes,
    )
    logger.info(f"[LEASES] Lease {lease.id} renewed until {end_date.isoformat()}")
    return successor
