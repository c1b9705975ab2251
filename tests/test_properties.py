"""Landlord property and unit management."""

import uuid

import pytest
from sqlalchemy import select

from app.models.audit import AuditLog
from app.models.enums import AuditAction, LeaseStatus, PropertyType
from app.models.property import Property, Unit
from tests.conftest import auth, make_lease

PROPERTY_BODY = {
    "name": "Birch House",
    "property_type": "SINGLE_FAMILY",
    "address_line1": "4 Birch Lane",
    "city": "Portland",
    "state": "OR",
    "zip_code": "97201",
}


async def create_property(client) -> dict:
    response = await client.post("/api/landlord/properties", json=PROPERTY_BODY, headers=auth("landlord"))
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_create_property(client, landlord):
    data = await create_property(client)

    assert data["owner_id"] == str(landlord.id)
    assert data["status"] == "ACTIVE"
    assert data["country"] == "US"
    assert data["units"] == []
    assert data["unit_count"] == 0


async def test_future_year_built_is_rejected(client, landlord):
    response = await client.post(
        "/api/landlord/properties",
        json={**PROPERTY_BODY, "year_built": 3000},
        headers=auth("landlord"),
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("year_built:")


async def test_tenant_cannot_create_property(client, tenant):
    response = await client.post("/api/landlord/properties", json=PROPERTY_BODY, headers=auth("tenant"))

    assert response.status_code == 403
    assert response.json()["error"] == "Landlord access required"


async def test_list_only_own_properties(client, prop, other_landlord):
    mine = await client.get("/api/landlord/properties", headers=auth("landlord"))
    theirs = await client.get("/api/landlord/properties", headers=auth("other-landlord"))

    assert [p["name"] for p in mine.json()["data"]] == ["Maple Court"]
    assert theirs.json()["data"] == []


async def test_other_landlord_cannot_read_property(client, prop, other_landlord):
    response = await client.get(f"/api/landlord/properties/{prop.id}", headers=auth("other-landlord"))

    assert response.status_code == 403


async def test_missing_property(client, landlord):
    response = await client.get(f"/api/landlord/properties/{uuid.uuid4()}", headers=auth("landlord"))

    assert response.status_code == 404
    assert response.json()["error"] == "Property not found"


async def test_update_property(client, prop):
    response = await client.put(
        f"/api/landlord/properties/{prop.id}",
        json={"name": "Maple Court North"},
        headers=auth("landlord"),
    )

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Maple Court North"
    assert response.json()["data"]["city"] == "Springfield"


async def test_create_unit_counts_and_rejects_duplicates(client, session_factory, prop):
    body = {"unit_number": "2B", "monthly_rent_cents": 120000, "bathrooms": 1.5}

    first = await client.post(f"/api/landlord/properties/{prop.id}/units", json=body, headers=auth("landlord"))
    second = await client.post(f"/api/landlord/properties/{prop.id}/units", json=body, headers=auth("landlord"))

    assert first.status_code == 201
    assert first.json()["data"]["status"] == "VACANT"
    assert second.status_code == 409
    async with session_factory() as session:
        stored = await session.get(Property, prop.id)
        assert stored.total_units == 2


async def test_unit_bathrooms_must_be_half_steps(client, prop):
    response = await client.post(
        f"/api/landlord/properties/{prop.id}/units",
        json={"unit_number": "3C", "monthly_rent_cents": 100000, "bathrooms": 1.25},
        headers=auth("landlord"),
    )

    assert response.status_code == 400


async def test_unit_from_other_property_is_rejected(client, db, prop, unit, landlord):
    other = Property(
        owner_id=landlord.id,
        name="Cedar Flats",
        property_type=PropertyType.APARTMENT,
        address_line1="9 Cedar Rd",
        city="Springfield",
        state="IL",
        zip_code="62702",
        total_units=0,
        amenities=[],
    )
    db.add(other)
    await db.commit()

    response = await client.get(f"/api/landlord/properties/{other.id}/units/{unit.id}", headers=auth("landlord"))

    assert response.status_code == 400
    assert response.json()["error"] == "Unit does not belong to this property"


async def test_delete_property_blocked_by_open_lease(client, db, prop, unit, tenant):
    await make_lease(db, unit, tenant, status=LeaseStatus.PENDING_SIGNATURE)

    response = await client.delete(f"/api/landlord/properties/{prop.id}", headers=auth("landlord"))

    assert response.status_code == 400
    assert "terminate all leases" in response.json()["error"]


async def test_delete_property_is_audited(client, session_factory, prop, unit):
    response = await client.delete(f"/api/landlord/properties/{prop.id}", headers=auth("landlord"))

    assert response.status_code == 200
    async with session_factory() as session:
        assert await session.get(Property, prop.id) is None
        logs = (await session.execute(select(AuditLog))).scalars().all()
    assert [log.action for log in logs] == [AuditAction.PROPERTY_DELETED]
    assert logs[0].details == {"name": "Maple Court"}


async def test_delete_unit_decrements_total(client, session_factory, prop, unit):
    response = await client.delete(f"/api/landlord/properties/{prop.id}/units/{unit.id}", headers=auth("landlord"))

    assert response.status_code == 200
    async with session_factory() as session:
        stored = await session.get(Property, prop.id)
        assert stored.total_units == 0


@pytest.mark.parametrize("lease_status", [LeaseStatus.ACTIVE, LeaseStatus.PENDING_SIGNATURE])
async def test_delete_unit_blocked_by_open_lease(client, db, session_factory, prop, unit, tenant, lease_status):
    await make_lease(db, unit, tenant, status=lease_status)

    response = await client.delete(f"/api/landlord/properties/{prop.id}/units/{unit.id}", headers=auth("landlord"))

    assert response.status_code == 400
    assert "terminate the lease first" in response.json()["error"]
    async with session_factory() as session:
        assert await session.get(Unit, unit.id) is not None
        stored = await session.get(Property, prop.id)
        assert stored.total_units == 1


@pytest.mark.parametrize("field", ["name", "property_type", "status", "city", "total_units"])
async def test_update_property_rejects_null(client, session_factory, prop, field):
    response = await client.put(
        f"/api/landlord/properties/{prop.id}",
        json={field: None},
        headers=auth("landlord"),
    )

    assert response.status_code == 400
    assert response.json()["error"] == f"{field}: {field} cannot be null"
    async with session_factory() as session:
        stored = await session.get(Property, prop.id)
        assert stored.name == "Maple Court"


async def test_update_property_allows_clearing_optional_fields(client, prop):
    response = await client.put(
        f"/api/landlord/properties/{prop.id}",
        json={"description": None, "year_built": None},
        headers=auth("landlord"),
    )

    assert response.status_code == 200
    assert response.json()["data"]["description"] is None


@pytest.mark.parametrize("field", ["unit_number", "status", "monthly_rent_cents"])
async def test_update_unit_rejects_null(client, session_factory, prop, unit, field):
    response = await client.put(
        f"/api/landlord/properties/{prop.id}/units/{unit.id}",
        json={field: None},
        headers=auth("landlord"),
    )

    assert response.status_code == 400
    assert response.json()["error"] == f"{field}: {field} cannot be null"
    async with session_factory() as session:
        stored = await session.get(Unit, unit.id)
        assert stored.unit_number == "101"
