"""Lease model."""

import uuid
from datetime import datetime, date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, Date, ForeignKey, Enum as SQLEnum, Text, BigInteger, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.enums import LeaseStatus

if TYPE_CHECKING:
    from app.models.property import Unit
    from app.models.user import User
    from app.models.payment import Payment


class Lease(Base):
    """A lease binding one tenant to one unit."""

    __tablename__ = "leases"

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
    renewed_from_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("leases.id", ondelete="SET NULL"),
        nullable=True,
    )

    status: Mapped[LeaseStatus] = mapped_column(
        SQLEnum(LeaseStatus),
        default=LeaseStatus.DRAFT,
        nullable=False,
        index=True,
    )

    # Dates
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    move_in_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    move_out_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Money (ALL INTEGER CENTS - BIGINT)
    monthly_rent_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    deposit_amount_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    late_fee_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    # Terms
    rent_due_day: Mapped[int] = mapped_column(Integer, default=1)
    grace_period_days: Mapped[int] = mapped_column(Integer, default=5)

    # Signatures
    tenant_signature: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tenant_signed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    tenant_signed_ip: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    landlord_signed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Termination
    terminated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    termination_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    unit: Mapped["Unit"] = relationship("Unit", back_populates="leases")
    tenant: Mapped["User"] = relationship(
        "User", back_populates="leases", foreign_keys=[tenant_id]
    )
    payments: Mapped[list["Payment"]] = relationship(
        "Payment",
        back_populates="lease",
        cascade="all, delete-orphan",
        order_by="Payment.created_at.desc()",
    )
