"""Maintenance schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, HttpUrl, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, reject_null
from app.schemas.property import PropertySummary
from app.models.enums import MaintenanceStatus, MaintenancePriority, MaintenanceCategory, UnitStatus


class MaintenanceRequestCreate(BaseSchema):
    """Tenant files a maintenance request."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., max_length=2000)
    category: MaintenanceCategory
    priority: MaintenancePriority = MaintenancePriority.MEDIUM
    entry_permission: bool = False
    preferred_times: Optional[str] = Field(None, max_length=500)
    photo_urls: list[HttpUrl] = Field(default_factory=list)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        if len(value) < 10:
            raise PydanticCustomError("description_too_short", "Please provide a detailed description")
        return value


class MaintenanceRequestUpdate(BaseSchema):
    """Landlord updates a maintenance request."""

    status: Optional[MaintenanceStatus] = None
    priority: Optional[MaintenancePriority] = None
    assigned_to_id: Optional[UUID] = None
    scheduled_date: Optional[datetime] = None
    scheduled_time_slot: Optional[str] = Field(None, max_length=100)
    estimated_cost_cents: Optional[int] = Field(None, ge=0)
    actual_cost_cents: Optional[int] = Field(None, ge=0)
    vendor_name: Optional[str] = Field(None, max_length=100)
    vendor_phone: Optional[str] = Field(None, max_length=20)
    resolution_notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("status", "priority")
    @classmethod
    def validate_required_columns(cls, value, info: ValidationInfo):
        return reject_null(value, info)


class MaintenanceUpdateCreate(BaseSchema):
    """Landlord posts a comment, optionally moving the status."""

    message: str = Field(..., min_length=1, max_length=1000)
    new_status: Optional[MaintenanceStatus] = None
    is_public: bool = True
    photo_urls: list[HttpUrl] = Field(default_factory=list)


class MaintenanceUpdateResponse(BaseSchema, IDMixin):
    """Maintenance update log entry."""

    request_id: UUID
    created_by_id: Optional[UUID] = None
    message: str
    previous_status: Optional[MaintenanceStatus] = None
    new_status: Optional[MaintenanceStatus] = None
    is_public: bool
    photo_urls: list[str] = []
    created_at: datetime


class MaintenanceUnitSummary(BaseSchema, IDMixin):
    """Unit fields embedded in maintenance responses."""

    unit_number: str
    status: UnitStatus
    property: PropertySummary


class MaintenanceTenantSummary(BaseSchema, IDMixin):
    """Tenant fields embedded in landlord maintenance responses."""

    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class MaintenanceRequestResponse(BaseSchema, IDMixin, TimestampMixin):
    """Maintenance request response."""

    unit_id: UUID
    tenant_id: UUID
    assigned_to_id: Optional[UUID] = None
    title: str
    description: str
    category: MaintenanceCategory
    priority: MaintenancePriority
    status: MaintenanceStatus
    entry_permission: bool
    preferred_times: Optional[str] = None
    photo_urls: list[str] = []
    scheduled_date: Optional[datetime] = None
    scheduled_time_slot: Optional[str] = None
    estimated_cost_cents: Optional[int] = None
    actual_cost_cents: Optional[int] = None
    vendor_name: Optional[str] = None
    vendor_phone: Optional[str] = None
    resolution_notes: Optional[str] = None
    acknowledged_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    unit: Optional[MaintenanceUnitSummary] = None
    tenant: Optional[MaintenanceTenantSummary] = None
    updates: list[MaintenanceUpdateResponse] = []
