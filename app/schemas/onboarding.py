"""Tenant onboarding schemas."""

from datetime import date
from typing import Literal, Optional
from uuid import UUID

from pydantic import EmailStr, Field, model_validator

from app.schemas.base import BaseSchema
from app.models.enums import EmploymentStatus


class OnboardingSubmission(BaseSchema):
    """Complete onboarding application, submitted once."""

    # Personal info
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    phone: str = Field(..., min_length=10, max_length=20)
    date_of_birth: date
    ssn_last4: str = Field(..., pattern=r"^\d{4}$")

    # Emergency contact
    emergency_contact_name: str = Field(..., min_length=1, max_length=100)
    emergency_contact_phone: str = Field(..., min_length=10, max_length=20)
    emergency_contact_relation: str = Field(..., min_length=1, max_length=50)

    # Employment
    employment_status: EmploymentStatus
    employer_name: Optional[str] = Field(None, max_length=100)
    employer_phone: Optional[str] = Field(None, max_length=20)
    monthly_income_cents: Optional[int] = Field(None, ge=0)

    # Unit selection
    unit_id: UUID
    move_in_date: date
    lease_term: Literal["6", "12", "18", "24"]

    # Review & sign
    agreed_to_terms: bool
    signature: str = Field(..., min_length=1, max_length=200)

    @model_validator(mode="after")
    def validate_terms(self):
        if not self.agreed_to_terms:
            raise ValueError("You must agree to the terms and conditions")
        return self


class OnboardingResult(BaseSchema):
    lease_id: UUID
