"""Notification center router, shared by landlords and tenants."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import get_current_user, AuthenticatedUser
from app.models.notification import Notification
from app.schemas.base import ApiResponse
from app.schemas.notification import (
    NotificationResponse,
    NotificationListResponse,
    Pagination,
    MarkReadRequest,
    MarkReadResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=ApiResponse[NotificationListResponse])
async def list_notifications(
    unread: bool = False,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Page through the caller's notifications, newest first."""
    filters = [Notification.user_id == current_user.db_user_id]
    if unread:
        filters.append(Notification.read_at.is_(None))

    total = (await db.execute(select(func.count(Notification.id)).where(*filters))).scalar_one()
    unread_count = (
        await db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == current_user.db_user_id,
                Notification.read_at.is_(None),
            )
        )
    ).scalar_one()

    result = await db.execute(
        select(Notification)
        .where(*filters)
        .order_by(Notification.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    notifications = result.scalars().all()

    return ApiResponse(
        data=NotificationListResponse(
            notifications=[NotificationResponse.model_validate(n) for n in notifications],
            pagination=Pagination(
                total=total,
                limit=limit,
                offset=offset,
                has_more=offset + len(notifications) < total,
            ),
            unread_count=unread_count,
        )
    )


@router.put("", response_model=ApiResponse[MarkReadResponse])
async def mark_notifications_read(
    data: MarkReadRequest,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Mark the given notifications, or all unread ones, as read."""
    query = update(Notification).where(
        Notification.user_id == current_user.db_user_id,
        Notification.read_at.is_(None),
    )
    if data.mark_all_read:
        message = "All notifications marked as read"
    elif data.notification_ids:
        query = query.where(Notification.id.in_(data.notification_ids))
        message = "Notifications marked as read"
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid request - provide notification_ids or mark_all_read",
        )

    result = await db.execute(query.values(read_at=datetime.utcnow()).execution_options(synchronize_session=False))
    await db.commit()

    return ApiResponse(data=MarkReadResponse(updated=result.rowcount), message=message)
