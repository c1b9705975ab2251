"""MaintenanceRequest and MaintenanceUpdate models."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, ForeignKey, Enum as SQLEnum, Text, BigInteger, Boolean, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.enums import MaintenanceStatus, MaintenancePriority, MaintenanceCategory

if TYPE_CHECKING:
    from app.models.property import Unit
    from app.models.user import User


class MaintenanceRequest(Base):
    """A maintenance request filed by a tenant against their unit."""

    __tablename__ = "maintenance_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    unit_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("units.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_to_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Request details
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[MaintenanceCategory] = mapped_column(
        SQLEnum(MaintenanceCategory),
        nullable=False,
    )
    priority: Mapped[MaintenancePriority] = mapped_column(
        SQLEnum(MaintenancePriority),
        default=MaintenancePriority.MEDIUM,
        nullable=False,
    )
    status: Mapped[MaintenanceStatus] = mapped_column(
        SQLEnum(MaintenanceStatus),
        default=MaintenanceStatus.SUBMITTED,
        nullable=False,
        index=True,
    )

    # Access
    entry_permission: Mapped[bool] = mapped_column(Boolean, default=False)
    preferred_times: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    photo_urls: Mapped[list[str]] = mapped_column(JSON, default=list)

    # Scheduling
    scheduled_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    scheduled_time_slot: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Cost (INTEGER CENTS)
    estimated_cost_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    actual_cost_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    # Vendor
    vendor_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    vendor_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    resolution_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Lifecycle timestamps (set once)
    acknowledged_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    unit: Mapped["Unit"] = relationship("Unit", back_populates="maintenance_requests")
    tenant: Mapped["User"] = relationship("User", foreign_keys=[tenant_id])
    updates: Mapped[list["MaintenanceUpdate"]] = relationship(
        "MaintenanceUpdate",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="MaintenanceUpdate.created_at.desc()",
    )


class MaintenanceUpdate(Base):
    """Append-only log entry on a maintenance request."""

    __tablename__ = "maintenance_updates"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    request_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("maintenance_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    message: Mapped[str] = mapped_column(Text, nullable=False)
    previous_status: Mapped[Optional[MaintenanceStatus]] = mapped_column(
        SQLEnum(MaintenanceStatus),
        nullable=True,
    )
    new_status: Mapped[Optional[MaintenanceStatus]] = mapped_column(
        SQLEnum(MaintenanceStatus),
        nullable=True,
    )
    # Internal notes are hidden from the tenant
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    photo_urls: Mapped[list[str]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    request: Mapped["MaintenanceRequest"] = relationship("MaintenanceRequest", back_populates="updates")
