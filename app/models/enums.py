"""Enumeration types for the Strukture domain model."""

from enum import Enum


class UserRole(str, Enum):
    """Account role."""
    TENANT = "TENANT"
    LANDLORD = "LANDLORD"
    ADMIN = "ADMIN"


class UserStatus(str, Enum):
    """Account status."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"
    SUSPENDED = "SUSPENDED"


class PropertyType(str, Enum):
    """Type of property."""
    SINGLE_FAMILY = "SINGLE_FAMILY"
    MULTI_FAMILY = "MULTI_FAMILY"
    APARTMENT = "APARTMENT"
    CONDO = "CONDO"
    TOWNHOUSE = "TOWNHOUSE"
    COMMERCIAL = "COMMERCIAL"


class PropertyStatus(str, Enum):
    """Status of a property."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    UNDER_RENOVATION = "UNDER_RENOVATION"


class UnitStatus(str, Enum):
    """Status of a unit."""
    VACANT = "VACANT"
    OCCUPIED = "OCCUPIED"
    UNDER_MAINTENANCE = "UNDER_MAINTENANCE"
    RESERVED = "RESERVED"


class LeaseStatus(str, Enum):
    """Status of a lease."""
    DRAFT = "DRAFT"
    PENDING_SIGNATURE = "PENDING_SIGNATURE"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    TERMINATED = "TERMINATED"
    RENEWED = "RENEWED"


# Leases that still bind a unit
OPEN_LEASE_STATUSES = (LeaseStatus.ACTIVE, LeaseStatus.PENDING_SIGNATURE)


class PaymentStatus(str, Enum):
    """Status of a payment."""
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    """How a payment was made."""
    ACH = "ACH"
    DEBIT_CARD = "DEBIT_CARD"
    CREDIT_CARD = "CREDIT_CARD"
    CASHIER_CHECK = "CASHIER_CHECK"
    CASH = "CASH"
    OTHER = "OTHER"


class PaymentType(str, Enum):
    """What a payment is for."""
    RENT = "RENT"
    DEPOSIT = "DEPOSIT"
    LATE_FEE = "LATE_FEE"
    UTILITY = "UTILITY"
    MAINTENANCE = "MAINTENANCE"
    OTHER = "OTHER"


class MaintenanceStatus(str, Enum):
    """Status of a maintenance request."""
    SUBMITTED = "SUBMITTED"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class MaintenancePriority(str, Enum):
    """Urgency of a maintenance request."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    EMERGENCY = "EMERGENCY"


class MaintenanceCategory(str, Enum):
    """Trade category of a maintenance request."""
    PLUMBING = "PLUMBING"
    ELECTRICAL = "ELECTRICAL"
    HVAC = "HVAC"
    APPLIANCE = "APPLIANCE"
    STRUCTURAL = "STRUCTURAL"
    PEST_CONTROL = "PEST_CONTROL"
    LANDSCAPING = "LANDSCAPING"
    CLEANING = "CLEANING"
    SECURITY = "SECURITY"
    OTHER = "OTHER"


class NotificationChannel(str, Enum):
    """Delivery channel of a stored notification."""
    IN_APP = "IN_APP"
    EMAIL = "EMAIL"
    TELEGRAM = "TELEGRAM"


class NotificationCategory(str, Enum):
    """Category shown in the notification center."""
    PAYMENT_REMINDER = "PAYMENT_REMINDER"
    PAYMENT_RECEIVED = "PAYMENT_RECEIVED"
    LEASE_EXPIRING = "LEASE_EXPIRING"
    MAINTENANCE_UPDATE = "MAINTENANCE_UPDATE"
    GENERAL = "GENERAL"
    SYSTEM = "SYSTEM"


class EmploymentStatus(str, Enum):
    """Employment status collected during onboarding."""
    EMPLOYED = "EMPLOYED"
    SELF_EMPLOYED = "SELF_EMPLOYED"
    UNEMPLOYED = "UNEMPLOYED"
    STUDENT = "STUDENT"
    RETIRED = "RETIRED"


class AuditAction(str, Enum):
    """Actions tracked in audit log."""
    TENANT_ONBOARDING_COMPLETED = "TENANT_ONBOARDING_COMPLETED"
    LEASE_ACTIVATED = "LEASE_ACTIVATED"
    LEASE_TERMINATED = "LEASE_TERMINATED"
    LEASE_RENEWED = "LEASE_RENEWED"
    PAYMENT_RECORDED = "PAYMENT_RECORDED"
    PAYMENT_REFUNDED = "PAYMENT_REFUNDED"
    PROPERTY_DELETED = "PROPERTY_DELETED"
    UNIT_DELETED = "UNIT_DELETED"
