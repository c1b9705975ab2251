"""Notification center endpoints."""

from datetime import datetime, timedelta

import pytest

from app.models.enums import NotificationCategory
from app.models.notification import Notification
from tests.conftest import auth


@pytest.fixture
async def inbox(db, tenant, landlord) -> list[Notification]:
    base = datetime.utcnow()
    notifications = [
        Notification(
            user_id=tenant.id,
            category=NotificationCategory.GENERAL,
            title=f"Notice {i}",
            message="Body",
            created_at=base + timedelta(minutes=i),
            read_at=base if i == 0 else None,
        )
        for i in range(5)
    ]
    notifications.append(
        Notification(user_id=landlord.id, category=NotificationCategory.SYSTEM, title="Landlord only", message="Body")
    )
    db.add_all(notifications)
    await db.commit()
    return notifications


async def test_list_is_newest_first_and_paginated(client, inbox):
    response = await client.get("/api/notifications?limit=2&offset=1", headers=auth("tenant"))

    assert response.status_code == 200
    data = response.json()["data"]
    assert [n["title"] for n in data["notifications"]] == ["Notice 3", "Notice 2"]
    assert data["pagination"] == {"total": 5, "limit": 2, "offset": 1, "has_more": True}
    assert data["unread_count"] == 4


async def test_unread_filter(client, inbox):
    response = await client.get("/api/notifications?unread=true&limit=10", headers=auth("tenant"))

    data = response.json()["data"]
    assert len(data["notifications"]) == 4
    assert data["pagination"]["has_more"] is False
    assert all(n["read_at"] is None for n in data["notifications"])


async def test_limit_is_bounded(client, inbox):
    response = await client.get("/api/notifications?limit=500", headers=auth("tenant"))

    assert response.status_code == 400


async def test_mark_selected_read(client, inbox):
    targets = [str(inbox[1].id), str(inbox[2].id), str(inbox[5].id)]

    response = await client.put("/api/notifications", json={"notification_ids": targets}, headers=auth("tenant"))

    assert response.status_code == 200
    # The landlord's notification is not the tenant's to mark
    assert response.json()["data"] == {"updated": 2}


async def test_mark_all_read(client, inbox):
    response = await client.put("/api/notifications", json={"mark_all_read": True}, headers=auth("tenant"))

    assert response.json()["data"] == {"updated": 4}
    listing = await client.get("/api/notifications", headers=auth("tenant"))
    assert listing.json()["data"]["unread_count"] == 0

    landlord_listing = await client.get("/api/notifications", headers=auth("landlord"))
    assert landlord_listing.json()["data"]["unread_count"] == 1


async def test_mark_read_needs_a_target(client, inbox):
    response = await client.put("/api/notifications", json={}, headers=auth("tenant"))

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request - provide notification_ids or mark_all_read"
