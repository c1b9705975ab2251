"""Payment schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin
from app.models.enums import PaymentStatus, PaymentMethod, PaymentType

OFFLINE_METHODS = (PaymentMethod.CASHIER_CHECK, PaymentMethod.CASH, PaymentMethod.OTHER)


class _PaymentPeriod(BaseSchema):
    period_start: Optional[date] = None
    period_end: Optional[date] = None

    @model_validator(mode="after")
    def validate_period(self):
        if self.period_start and self.period_end and self.period_end < self.period_start:
            raise ValueError("period_end must not be before period_start")
        return self


class PaymentCreate(_PaymentPeriod):
    """Tenant-initiated online payment."""

    lease_id: UUID
    type: PaymentType
    method: PaymentMethod
    amount_cents: int = Field(..., ge=1)
    notes: Optional[str] = Field(None, max_length=500)


class ManualPaymentCreate(_PaymentPeriod):
    """Payment received offline and recorded by the landlord."""

    lease_id: UUID
    tenant_id: UUID
    type: PaymentType
    method: PaymentMethod
    amount_cents: int = Field(..., ge=1)
    check_number: Optional[str] = Field(None, max_length=50)
    check_date: Optional[date] = None
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("method")
    @classmethod
    def validate_method(cls, value: PaymentMethod) -> PaymentMethod:
        if value not in OFFLINE_METHODS:
            raise ValueError("Manual payments must be cash, cashier check or other")
        return value


class RefundRequest(BaseSchema):
    """Refund a completed payment."""

    reason: Optional[str] = Field(None, max_length=500)


class PaymentResponse(BaseSchema, IDMixin, TimestampMixin):
    """Payment response."""

    lease_id: UUID
    tenant_id: UUID
    received_by_id: Optional[UUID] = None
    type: PaymentType
    method: PaymentMethod
    status: PaymentStatus
    amount_cents: int
    due_date: Optional[date] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    processed_at: Optional[datetime] = None
    stripe_payment_intent_id: Optional[str] = None
    failure_reason: Optional[str] = None
    check_number: Optional[str] = None
    check_date: Optional[date] = None
    notes: Optional[str] = None


class PaymentIntentResponse(BaseSchema):
    """Pending payment plus the client secret used to confirm it in the browser."""

    payment: PaymentResponse
    client_secret: str


class PaymentMethodResponse(BaseSchema, IDMixin):
    """Stored payment method (masked)."""

    type: str
    brand: Optional[str] = None
    bank_name: Optional[str] = None
    last4: Optional[str] = None
    masked_number: Optional[str] = None
    exp_month: Optional[int] = None
    exp_year: Optional[int] = None
    is_default: bool
    created_at: datetime


class SetupIntentResponse(BaseSchema):
    """Client secret for saving a new payment method."""

    client_secret: str
