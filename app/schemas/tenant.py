"""Landlord-facing tenant roster schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from app.schemas.base import BaseSchema, IDMixin
from app.schemas.lease import LeaseDetailResponse
from app.schemas.payment import PaymentResponse
from app.models.enums import (
    EmploymentStatus,
    LeaseStatus,
    MaintenanceStatus,
    MaintenancePriority,
    UserStatus,
)


class TenantLeaseSummary(BaseSchema, IDMixin):
    status: LeaseStatus
    start_date: date
    end_date: date
    monthly_rent_cents: int
    unit_id: UUID
    unit_number: str
    property_id: UUID
    property_name: str


class TenantListItem(BaseSchema, IDMixin):
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    status: UserStatus
    leases: list[TenantLeaseSummary]


class TenantRosterSummary(BaseSchema):
    total: int
    active: int
    expiring_leases: int


class TenantListResponse(BaseSchema):
    tenants: list[TenantListItem]
    summary: TenantRosterSummary


class EmergencyContact(BaseSchema):
    name: Optional[str] = None
    phone: Optional[str] = None
    relation: Optional[str] = None


class TenantLeaseWithPayments(LeaseDetailResponse):
    payments: list[PaymentResponse] = []


class TenantMaintenanceSummary(BaseSchema, IDMixin):
    title: str
    status: MaintenanceStatus
    priority: MaintenancePriority
    created_at: datetime


class PaymentSummary(BaseSchema):
    total_paid_cents: int
    pending_payments: int
    late_payments: int


class TenantDetailResponse(BaseSchema, IDMixin):
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    status: UserStatus
    date_of_birth: Optional[date] = None
    ssn_masked: Optional[str] = None
    employment_status: Optional[EmploymentStatus] = None
    employer_name: Optional[str] = None
    monthly_income_cents: Optional[int] = None
    emergency_contact: EmergencyContact
    leases: list[TenantLeaseWithPayments]
    maintenance_requests: list[TenantMaintenanceSummary]
    payment_summary: PaymentSummary
    created_at: datetime
