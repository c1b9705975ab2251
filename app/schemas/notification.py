"""Notification schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from app.schemas.base import BaseSchema, IDMixin
from app.models.enums import NotificationChannel, NotificationCategory


class NotificationResponse(BaseSchema, IDMixin):
    """Notification center entry."""

    channel: NotificationChannel
    category: NotificationCategory
    title: str
    message: str
    action_url: Optional[str] = None
    sent_at: Optional[datetime] = None
    read_at: Optional[datetime] = None
    created_at: datetime


class Pagination(BaseSchema):
    total: int
    limit: int
    offset: int
    has_more: bool


class NotificationListResponse(BaseSchema):
    notifications: list[NotificationResponse]
    pagination: Pagination
    unread_count: int


class MarkReadRequest(BaseSchema):
    """Mark specific notifications, or all of them, as read."""

    notification_ids: Optional[list[UUID]] = None
    mark_all_read: bool = False


class MarkReadResponse(BaseSchema):
    updated: int
