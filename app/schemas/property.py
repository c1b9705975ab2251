"""Property and Unit schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, ValidationInfo, field_validator

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, reject_null
from app.models.enums import PropertyType, PropertyStatus, UnitStatus


def _check_year_built(value: Optional[int]) -> Optional[int]:
    if value is not None and value > datetime.utcnow().year:
        raise ValueError("Year built cannot be in the future")
    return value


class PropertyCreate(BaseSchema):
    """Create a new property."""

    name: str = Field(..., min_length=1, max_length=100)
    property_type: PropertyType
    status: PropertyStatus = PropertyStatus.ACTIVE

    address_line1: str = Field(..., min_length=1, max_length=200)
    address_line2: Optional[str] = Field(None, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=2, max_length=50)
    zip_code: str = Field(..., min_length=5, max_length=10)
    country: str = Field("US", min_length=2, max_length=50)

    year_built: Optional[int] = Field(None, ge=1800)
    total_units: int = Field(1, ge=1)
    parking_spaces: Optional[int] = Field(None, ge=0)
    amenities: list[str] = Field(default_factory=list)
    description: Optional[str] = Field(None, max_length=2000)

    license_number: Optional[str] = Field(None, max_length=50)
    license_expiry: Optional[date] = None

    @field_validator("year_built")
    @classmethod
    def validate_year_built(cls, value: Optional[int]) -> Optional[int]:
        return _check_year_built(value)


class PropertyUpdate(BaseSchema):
    """Update property."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    property_type: Optional[PropertyType] = None
    status: Optional[PropertyStatus] = None
    address_line1: Optional[str] = Field(None, min_length=1, max_length=200)
    address_line2: Optional[str] = Field(None, max_length=200)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=2, max_length=50)
    zip_code: Optional[str] = Field(None, min_length=5, max_length=10)
    country: Optional[str] = Field(None, min_length=2, max_length=50)
    year_built: Optional[int] = Field(None, ge=1800)
    total_units: Optional[int] = Field(None, ge=1)
    parking_spaces: Optional[int] = Field(None, ge=0)
    amenities: Optional[list[str]] = None
    description: Optional[str] = Field(None, max_length=2000)
    license_number: Optional[str] = Field(None, max_length=50)
    license_expiry: Optional[date] = None

    @field_validator("year_built")
    @classmethod
    def validate_year_built(cls, value: Optional[int]) -> Optional[int]:
        return _check_year_built(value)

    @field_validator(
        "name",
        "property_type",
        "status",
        "address_line1",
        "city",
        "state",
        "zip_code",
        "country",
        "total_units",
        "amenities",
    )
    @classmethod
    def validate_required_columns(cls, value, info: ValidationInfo):
        return reject_null(value, info)


class UnitCreate(BaseSchema):
    """Create a new unit."""

    unit_number: str = Field(..., min_length=1, max_length=20)
    status: UnitStatus = UnitStatus.VACANT
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0, multiple_of=0.5)
    square_feet: Optional[int] = Field(None, gt=0)
    floor: Optional[int] = None
    monthly_rent_cents: int = Field(..., ge=0)
    deposit_amount_cents: int = Field(0, ge=0)
    features: list[str] = Field(default_factory=list)
    pet_policy: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=2000)


class UnitUpdate(BaseSchema):
    """Update unit."""

    unit_number: Optional[str] = Field(None, min_length=1, max_length=20)
    status: Optional[UnitStatus] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0, multiple_of=0.5)
    square_feet: Optional[int] = Field(None, gt=0)
    floor: Optional[int] = None
    monthly_rent_cents: Optional[int] = Field(None, ge=0)
    deposit_amount_cents: Optional[int] = Field(None, ge=0)
    features: Optional[list[str]] = None
    pet_policy: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=2000)

    @field_validator("unit_number", "status", "monthly_rent_cents", "deposit_amount_cents", "features")
    @classmethod
    def validate_required_columns(cls, value, info: ValidationInfo):
        return reject_null(value, info)


class UnitResponse(BaseSchema, IDMixin, TimestampMixin):
    """Unit response."""

    property_id: UUID
    unit_number: str
    status: UnitStatus
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    square_feet: Optional[int] = None
    floor: Optional[int] = None
    monthly_rent_cents: int
    deposit_amount_cents: int = 0
    features: list[str] = []
    pet_policy: Optional[str] = None
    description: Optional[str] = None


class PropertySummary(BaseSchema, IDMixin):
    """Property fields embedded in unit, lease and request responses."""

    name: str
    address_line1: str
    city: str
    state: str
    zip_code: str


class PropertyResponse(BaseSchema, IDMixin, TimestampMixin):
    """Property response."""

    owner_id: UUID
    name: str
    property_type: PropertyType
    status: PropertyStatus
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: str
    zip_code: str
    country: str
    year_built: Optional[int] = None
    total_units: int
    parking_spaces: Optional[int] = None
    amenities: list[str] = []
    description: Optional[str] = None
    license_number: Optional[str] = None
    license_expiry: Optional[date] = None
    units: list[UnitResponse] = []
    unit_count: int = 0


class AvailableUnitResponse(UnitResponse):
    """Vacant unit offered during onboarding."""

    property: PropertySummary
