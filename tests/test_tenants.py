"""Landlord tenant roster."""

import uuid
from datetime import date, timedelta

from app.core.encryption import encrypt
from app.models.enums import (
    LeaseStatus,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    UnitStatus,
    UserRole,
)
from app.models.payment import Payment
from app.models.property import Unit
from tests.conftest import auth, make_lease, make_user


async def add_unit(db, prop, number: str) -> Unit:
    unit = Unit(property_id=prop.id, unit_number=number, status=UnitStatus.VACANT, monthly_rent_cents=100000)
    db.add(unit)
    await db.commit()
    return unit


async def test_roster_summary(client, db, prop, unit, tenant):
    await make_lease(db, unit, tenant, end=date.today() + timedelta(days=20))
    second_unit = await add_unit(db, prop, "102")
    other = await make_user(db, "tenant-two", UserRole.TENANT)
    await make_lease(db, second_unit, other, end=date.today() + timedelta(days=200))
    third_unit = await add_unit(db, prop, "103")
    former = await make_user(db, "former", UserRole.TENANT)
    await make_lease(
        db,
        third_unit,
        former,
        status=LeaseStatus.TERMINATED,
        start=date(2024, 1, 1),
        end=date(2024, 12, 31),
    )

    response = await client.get("/api/landlord/tenants", headers=auth("landlord"))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["summary"] == {"total": 3, "active": 2, "expiring_leases": 1}
    assert {t["email"] for t in data["tenants"]} == {
        "tenant@example.com",
        "tenant-two@example.com",
        "former@example.com",
    }


async def test_roster_filter_by_lease_status(client, db, unit, tenant, active_lease):
    response = await client.get("/api/landlord/tenants?lease_status=TERMINATED", headers=auth("landlord"))

    assert response.json()["data"]["tenants"] == []


async def test_roster_is_scoped_to_landlord(client, other_landlord, active_lease):
    response = await client.get("/api/landlord/tenants", headers=auth("other-landlord"))

    assert response.json()["data"]["summary"]["total"] == 0


async def test_tenant_detail(client, db, tenant, active_lease):
    tenant.ssn_encrypted = encrypt("6789")
    tenant.emergency_contact_name = "Sam Test"
    db.add_all([
        Payment(
            lease_id=active_lease.id,
            tenant_id=tenant.id,
            type=PaymentType.RENT,
            method=PaymentMethod.CASH,
            status=PaymentStatus.COMPLETED,
            amount_cents=150000,
        ),
        Payment(
            lease_id=active_lease.id,
            tenant_id=tenant.id,
            type=PaymentType.RENT,
            method=PaymentMethod.ACH,
            status=PaymentStatus.PENDING,
            amount_cents=150000,
            due_date=date.today() - timedelta(days=3),
        ),
    ])
    await db.commit()

    response = await client.get(f"/api/landlord/tenants/{tenant.id}", headers=auth("landlord"))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["ssn_masked"] == "***-**-6789"
    assert data["emergency_contact"]["name"] == "Sam Test"
    assert data["payment_summary"] == {
        "total_paid_cents": 150000,
        "pending_payments": 1,
        "late_payments": 1,
    }
    assert len(data["leases"]) == 1
    assert len(data["leases"][0]["payments"]) == 2
    assert data["leases"][0]["unit"]["unit_number"] == "101"


async def test_unreadable_ssn_is_omitted(client, db, tenant, active_lease):
    tenant.ssn_encrypted = "not-a-fernet-token"
    await db.commit()

    response = await client.get(f"/api/landlord/tenants/{tenant.id}", headers=auth("landlord"))

    assert response.status_code == 200
    assert response.json()["data"]["ssn_masked"] is None


async def test_tenant_of_another_landlord_is_hidden(client, other_landlord, tenant, active_lease):
    response = await client.get(f"/api/landlord/tenants/{tenant.id}", headers=auth("other-landlord"))

    assert response.status_code == 404


async def test_unknown_tenant(client, landlord):
    response = await client.get(f"/api/landlord/tenants/{uuid.uuid4()}", headers=auth("landlord"))

    assert response.status_code == 404
    assert response.json()["error"] == "Tenant not found"
