"""Maintenance request lifecycle.

Status graph::

    SUBMITTED -> ACKNOWLEDGED -> IN_PROGRESS <-> ON_HOLD
                                 IN_PROGRESS -> COMPLETED
    ON_HOLD -> ACKNOWLEDGED
    any non-terminal -> CANCELLED

COMPLETED and CANCELLED are terminal. Every actual status change appends a
MaintenanceUpdate row; ``acknowledged_at`` and ``completed_at`` are stamped
the first time their status is entered and never overwritten.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.enums import MaintenanceStatus
from app.models.maintenance import MaintenanceRequest, MaintenanceUpdate
from app.models.property import Unit
from app.services.formatting import format_label

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({MaintenanceStatus.COMPLETED, MaintenanceStatus.CANCELLED})

ALLOWED_TRANSITIONS: dict[MaintenanceStatus, frozenset[MaintenanceStatus]] = {
    MaintenanceStatus.SUBMITTED: frozenset({
        MaintenanceStatus.ACKNOWLEDGED,
        MaintenanceStatus.IN_PROGRESS,
        MaintenanceStatus.CANCELLED,
    }),
    MaintenanceStatus.ACKNOWLEDGED: frozenset({
        MaintenanceStatus.IN_PROGRESS,
        MaintenanceStatus.ON_HOLD,
        MaintenanceStatus.CANCELLED,
    }),
    MaintenanceStatus.IN_PROGRESS: frozenset({
        MaintenanceStatus.ON_HOLD,
        MaintenanceStatus.COMPLETED,
        MaintenanceStatus.CANCELLED,
    }),
    MaintenanceStatus.ON_HOLD: frozenset({
        MaintenanceStatus.ACKNOWLEDGED,
        MaintenanceStatus.IN_PROGRESS,
        MaintenanceStatus.CANCELLED,
    }),
    MaintenanceStatus.COMPLETED: frozenset(),
    MaintenanceStatus.CANCELLED: frozenset(),
}


class InvalidTransitionError(Exception):
    """Raised when a status change is not allowed by the lifecycle."""

    def __init__(self, current: MaintenanceStatus, requested: MaintenanceStatus):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot change status from {format_label(current.value)} to {format_label(requested.value)}"
        )


def can_transition(current: MaintenanceStatus, requested: MaintenanceStatus) -> bool:
    return requested in ALLOWED_TRANSITIONS[current]


def status_change_message(previous: MaintenanceStatus, new: MaintenanceStatus) -> str:
    return f"Status changed from {format_label(previous.value)} to {format_label(new.value)}"


class MaintenanceService:
    """Applies lifecycle rules to a loaded MaintenanceRequest.

    Changes are added to the session; the caller commits them together.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def _apply_status(self, request: MaintenanceRequest, new_status: MaintenanceStatus) -> MaintenanceStatus:
        previous = request.status
        if not can_transition(previous, new_status):
            raise InvalidTransitionError(previous, new_status)

        now = datetime.utcnow()
        request.status = new_status
        if new_status == MaintenanceStatus.ACKNOWLEDGED and request.acknowledged_at is None:
            request.acknowledged_at = now
        if new_status == MaintenanceStatus.COMPLETED and request.completed_at is None:
            request.completed_at = now
        return previous

    def change_status(
        self,
        request: MaintenanceRequest,
        new_status: MaintenanceStatus,
        actor_id: Optional[UUID],
    ) -> Optional[MaintenanceUpdate]:
        """Move the request to new_status and log it.

        Returns the appended update, or None when the status is unchanged.
        """
        if new_status == request.status:
            return None

        previous = self._apply_status(request, new_status)
        entry = MaintenanceUpdate(
            request_id=request.id,
            message=status_change_message(previous, new_status),
            previous_status=previous,
            new_status=new_status,
            is_public=True,
            photo_urls=[],
            created_by_id=actor_id,
        )
        self.db.add(entry)
        logger.info(f"[MAINTENANCE] {request.id}: {previous.value} -> {new_status.value}")
        return entry

    def add_update(
        self,
        request: MaintenanceRequest,
        actor_id: Optional[UUID],
        message: str,
        new_status: Optional[MaintenanceStatus] = None,
        is_public: bool = True,
        photo_urls: Optional[list[str]] = None,
    ) -> MaintenanceUpdate:
        """Append a comment, moving the status too when new_status differs.

        The entry records the status it was written under; a plain comment
        carries the current status in both fields.
        """
        previous_status = request.status
        recorded_status = request.status
        if new_status is not None and new_status != request.status:
            previous_status = self._apply_status(request, new_status)
            recorded_status = new_status
            logger.info(f"[MAINTENANCE] {request.id}: {previous_status.value} -> {new_status.value}")

        entry = MaintenanceUpdate(
            request_id=request.id,
            message=message,
            previous_status=previous_status,
            new_status=recorded_status,
            is_public=is_public,
            photo_urls=photo_urls or [],
            created_by_id=actor_id,
        )
        self.db.add(entry)
        return entry


def request_query():
    """Select MaintenanceRequest with unit, property, tenant and updates loaded."""
    return select(MaintenanceRequest).options(
        selectinload(MaintenanceRequest.unit).selectinload(Unit.property),
        selectinload(MaintenanceRequest.tenant),
        selectinload(MaintenanceRequest.updates),
    )


async def load_request(db: AsyncSession, request_id: UUID) -> Optional[MaintenanceRequest]:
    result = await db.execute(
        request_query()
        .where(MaintenanceRequest.id == request_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
