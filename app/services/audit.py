"""Audit logging service."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import AuditLog
from app.models.enums import AuditAction


class AuditService:
    """Service for creating audit log entries inside the caller's transaction."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log(
        self,
        action: AuditAction,
        resource_type: str,
        resource_id: UUID,
        user_id: Optional[UUID] = None,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuditLog:
        """Create an audit log entry."""
        entry = AuditLog(
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            user_id=user_id,
            details=details or {},
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def log_onboarding_completed(
        self,
        lease_id: UUID,
        user_id: UUID,
        unit_id: UUID,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuditLog:
        """Log a submitted tenant application."""
        return await self.log(
            action=AuditAction.TENANT_ONBOARDING_COMPLETED,
            resource_type="lease",
            resource_id=lease_id,
            user_id=user_id,
            details={"unit_id": str(unit_id), **(details or {})},
            ip_address=ip_address,
            user_agent=user_agent,
        )

    async def log_lease_change(
        self,
        action: AuditAction,
        lease_id: UUID,
        user_id: UUID,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """Log a landlord lease action (activate, terminate, renew)."""
        return await self.log(
            action=action,
            resource_type="lease",
            resource_id=lease_id,
            user_id=user_id,
            details=details,
            ip_address=ip_address,
        )

    async def log_payment(
        self,
        action: AuditAction,
        payment_id: UUID,
        user_id: UUID,
        amount_cents: int,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """Log a manual payment or a refund."""
        return await self.log(
            action=action,
            resource_type="payment",
            resource_id=payment_id,
            user_id=user_id,
            details={"amount_cents": amount_cents, **(details or {})},
            ip_address=ip_address,
        )

    async def log_deletion(
        self,
        action: AuditAction,
        resource_type: str,
        resource_id: UUID,
        user_id: UUID,
        details: Optional[dict[str, Any]] = None,
    ) -> AuditLog:
        """Log a property or unit deletion."""
        return await self.log(
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            user_id=user_id,
            details=details,
        )
