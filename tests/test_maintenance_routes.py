"""Landlord and tenant maintenance endpoints."""

import uuid

import pytest
from sqlalchemy import select

from app.models.enums import MaintenancePriority, MaintenanceStatus, NotificationCategory, UserRole
from app.models.maintenance import MaintenanceRequest, MaintenanceUpdate
from app.models.notification import Notification
from tests.conftest import auth, make_user

REQUEST_BODY = {
    "title": "Leaking sink",
    "description": "Water pools under the kitchen sink every morning",
    "category": "PLUMBING",
}


async def submit(client, **overrides) -> dict:
    response = await client.post("/api/tenant/maintenance", json={**REQUEST_BODY, **overrides}, headers=auth("tenant"))
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_tenant_without_lease_cannot_submit(client, tenant):
    response = await client.post("/api/tenant/maintenance", json=REQUEST_BODY, headers=auth("tenant"))

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "No active lease found"}


async def test_submit_defaults_and_landlord_notification(client, session_factory, landlord, active_lease):
    data = await submit(client)

    assert data["status"] == "SUBMITTED"
    assert data["priority"] == "MEDIUM"
    assert data["unit_id"] == str(active_lease.unit_id)
    assert data["updates"] == []

    async with session_factory() as session:
        notes = (await session.execute(select(Notification).where(Notification.user_id == landlord.id))).scalars().all()
    assert len(notes) == 1
    assert notes[0].category == NotificationCategory.MAINTENANCE_UPDATE
    assert notes[0].title == "New Maintenance Request"
    assert notes[0].action_url == f"/landlord/maintenance/{data['id']}"


async def test_short_description_is_rejected(client, active_lease):
    response = await client.post(
        "/api/tenant/maintenance",
        json={**REQUEST_BODY, "description": "Leaks"},
        headers=auth("tenant"),
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("description:")


async def test_landlord_cannot_use_tenant_endpoint(client, landlord, active_lease):
    response = await client.post("/api/tenant/maintenance", json=REQUEST_BODY, headers=auth("landlord"))

    assert response.status_code == 403


async def test_landlord_list_orders_by_priority(client, active_lease):
    await submit(client, title="Squeaky door", priority="LOW")
    await submit(client, title="Gas smell", priority="EMERGENCY")
    await submit(client, title="Broken heater", priority="HIGH")

    response = await client.get("/api/landlord/maintenance", headers=auth("landlord"))

    assert response.status_code == 200
    titles = [r["title"] for r in response.json()["data"]]
    assert titles == ["Gas smell", "Broken heater", "Squeaky door"]


async def test_landlord_list_filters_by_status(client, active_lease):
    await submit(client)

    response = await client.get("/api/landlord/maintenance?status=COMPLETED", headers=auth("landlord"))

    assert response.json()["data"] == []


async def test_status_change_logs_update_and_notifies_tenant(client, session_factory, tenant, active_lease):
    created = await submit(client)

    response = await client.put(
        f"/api/landlord/maintenance/{created['id']}",
        json={"status": "ACKNOWLEDGED", "vendor_name": "Ace Plumbing"},
        headers=auth("landlord"),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "ACKNOWLEDGED"
    assert data["vendor_name"] == "Ace Plumbing"
    assert data["acknowledged_at"] is not None
    assert len(data["updates"]) == 1
    assert data["updates"][0]["message"] == "Status changed from Submitted to Acknowledged"

    async with session_factory() as session:
        notes = (await session.execute(select(Notification).where(Notification.user_id == tenant.id))).scalars().all()
    assert [n.title for n in notes] == ["Maintenance Request Updated"]


async def test_invalid_transition_is_rejected(client, session_factory, active_lease):
    created = await submit(client)

    response = await client.put(
        f"/api/landlord/maintenance/{created['id']}",
        json={"status": "COMPLETED"},
        headers=auth("landlord"),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Cannot change status from Submitted to Completed"
    async with session_factory() as session:
        request = await session.get(MaintenanceRequest, uuid.UUID(created["id"]))
        assert request.status == MaintenanceStatus.SUBMITTED


@pytest.mark.parametrize("field", ["priority", "status"])
async def test_update_rejects_null_for_required_fields(client, session_factory, active_lease, field):
    created = await submit(client, priority="HIGH")

    response = await client.put(
        f"/api/landlord/maintenance/{created['id']}",
        json={field: None},
        headers=auth("landlord"),
    )

    assert response.status_code == 400
    assert response.json()["error"] == f"{field}: {field} cannot be null"
    async with session_factory() as session:
        request = await session.get(MaintenanceRequest, uuid.UUID(created["id"]))
        assert request.priority == MaintenancePriority.HIGH
        assert request.status == MaintenanceStatus.SUBMITTED


async def test_update_without_status_change_writes_no_log(client, session_factory, active_lease):
    created = await submit(client)

    response = await client.put(
        f"/api/landlord/maintenance/{created['id']}",
        json={"status": "SUBMITTED", "estimated_cost_cents": 12500},
        headers=auth("landlord"),
    )

    assert response.status_code == 200
    assert response.json()["data"]["estimated_cost_cents"] == 12500
    async with session_factory() as session:
        updates = (await session.execute(select(MaintenanceUpdate))).scalars().all()
    assert updates == []


async def test_other_landlord_is_forbidden(client, other_landlord, active_lease):
    created = await submit(client)

    response = await client.get(f"/api/landlord/maintenance/{created['id']}", headers=auth("other-landlord"))

    assert response.status_code == 403


async def test_internal_notes_hidden_from_tenant(client, active_lease):
    created = await submit(client)
    request_id = created["id"]

    internal = await client.post(
        f"/api/landlord/maintenance/{request_id}/updates",
        json={"message": "Tenant was rude on the phone", "is_public": False},
        headers=auth("landlord"),
    )
    public = await client.post(
        f"/api/landlord/maintenance/{request_id}/updates",
        json={"message": "Plumber visits Tuesday", "new_status": "ACKNOWLEDGED"},
        headers=auth("landlord"),
    )
    assert internal.status_code == 201
    assert public.status_code == 201

    landlord_view = await client.get(f"/api/landlord/maintenance/{request_id}", headers=auth("landlord"))
    tenant_view = await client.get(f"/api/tenant/maintenance/{request_id}", headers=auth("tenant"))

    assert len(landlord_view.json()["data"]["updates"]) == 2
    tenant_updates = tenant_view.json()["data"]["updates"]
    assert [u["message"] for u in tenant_updates] == ["Plumber visits Tuesday"]
    assert tenant_view.json()["data"]["status"] == "ACKNOWLEDGED"


async def test_tenant_cannot_read_someone_elses_request(client, db, active_lease):
    created = await submit(client)
    await make_user(db, "neighbour", UserRole.TENANT)

    response = await client.get(f"/api/tenant/maintenance/{created['id']}", headers=auth("neighbour"))

    assert response.status_code == 403
