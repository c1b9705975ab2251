"""Lease schemas."""

from datetime import date, datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import Field, model_validator

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin
from app.schemas.property import PropertySummary
from app.models.enums import LeaseStatus, UnitStatus


class LeaseUnitSummary(BaseSchema, IDMixin):
    """Unit fields embedded in lease responses."""

    unit_number: str
    status: UnitStatus
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    property: PropertySummary


class LeaseResponse(BaseSchema, IDMixin, TimestampMixin):
    """Lease response."""

    unit_id: UUID
    tenant_id: UUID
    renewed_from_id: Optional[UUID] = None
    status: LeaseStatus
    start_date: date
    end_date: date
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None
    monthly_rent_cents: int
    deposit_amount_cents: int
    late_fee_cents: Optional[int] = None
    rent_due_day: int
    grace_period_days: int
    tenant_signed_at: Optional[datetime] = None
    landlord_signed_at: Optional[datetime] = None
    terminated_at: Optional[datetime] = None
    termination_reason: Optional[str] = None
    notes: Optional[str] = None


class LeaseDetailResponse(LeaseResponse):
    """Lease with its unit and property."""

    unit: LeaseUnitSummary


class LeaseTerminateRequest(BaseSchema):
    """Terminate a lease."""

    reason: Optional[str] = Field(None, max_length=2000)
    move_out_date: Optional[date] = None


class LeaseRenewRequest(BaseSchema):
    """Renew an active lease into a new term."""

    end_date: date
    monthly_rent_cents: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def validate_end_date(self):
        if self.end_date <= date.today():
            raise ValueError("end_date must be in the future")
        return self


class LeaseReminderRequest(BaseSchema):
    """Send a rent, late payment or expiry reminder to the lease's tenant."""

    kind: Literal["RENT_DUE", "LATE_PAYMENT", "LEASE_EXPIRING"]
    amount_cents: Optional[int] = Field(None, ge=1)
