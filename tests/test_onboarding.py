"""Tenant onboarding: unit browsing and application submission."""

import uuid
from datetime import date

from sqlalchemy import select

from app.core.encryption import decrypt
from app.models.audit import AuditLog
from app.models.enums import (
    AuditAction,
    LeaseStatus,
    PropertyStatus,
    UnitStatus,
    UserRole,
    UserStatus,
)
from app.models.lease import Lease
from app.models.property import Unit
from app.models.user import User
from tests.conftest import auth, make_user


def application(unit_id, **overrides) -> dict:
    body = {
        "first_name": "Robin",
        "last_name": "Okafor",
        "email": "robin@example.com",
        "phone": "5555550100",
        "date_of_birth": "1990-04-12",
        "ssn_last4": "6789",
        "emergency_contact_name": "Sam Okafor",
        "emergency_contact_phone": "5555550101",
        "emergency_contact_relation": "Sibling",
        "employment_status": "EMPLOYED",
        "employer_name": "Acme Corp",
        "monthly_income_cents": 650000,
        "unit_id": str(unit_id),
        "move_in_date": "2027-01-31",
        "lease_term": "12",
        "agreed_to_terms": True,
        "signature": "Robin Okafor",
    }
    body.update(overrides)
    return body


async def test_available_units_is_public_and_ordered(client, db, prop, unit):
    db.add_all([
        Unit(property_id=prop.id, unit_number="100", status=UnitStatus.VACANT, monthly_rent_cents=90000),
        Unit(property_id=prop.id, unit_number="102", status=UnitStatus.OCCUPIED, monthly_rent_cents=90000),
    ])
    await db.commit()

    response = await client.get("/api/onboarding/available-units")

    assert response.status_code == 200
    data = response.json()["data"]
    assert [u["unit_number"] for u in data] == ["100", "101"]
    assert data[0]["property"]["name"] == "Maple Court"


async def test_available_units_skip_inactive_properties(client, db, prop, unit):
    prop.status = PropertyStatus.INACTIVE
    await db.commit()

    response = await client.get("/api/onboarding/available-units")

    assert response.json()["data"] == []


async def test_submit_creates_pending_lease(client, session_factory, tenant, unit):
    response = await client.post(
        "/api/onboarding/submit",
        json=application(unit.id),
        headers={**auth("tenant"), "X-Forwarded-For": "203.0.113.7, 10.0.0.1", "User-Agent": "pytest"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Application submitted successfully. Awaiting landlord approval."
    lease_id = uuid.UUID(body["data"]["lease_id"])

    async with session_factory() as session:
        lease = await session.get(Lease, lease_id)
        stored_unit = await session.get(Unit, unit.id)
        user = await session.get(User, tenant.id)
        logs = (await session.execute(select(AuditLog))).scalars().all()

    assert lease.status == LeaseStatus.PENDING_SIGNATURE
    assert lease.start_date == date(2027, 1, 31)
    # January 31 plus twelve months stays on the 31st
    assert lease.end_date == date(2028, 1, 31)
    assert lease.monthly_rent_cents == 150000
    assert lease.tenant_signed_ip == "203.0.113.7"
    assert lease.tenant_signature == "Robin Okafor"
    assert stored_unit.status == UnitStatus.RESERVED

    assert user.status == UserStatus.ACTIVE
    assert user.ssn_encrypted != "6789"
    assert decrypt(user.ssn_encrypted) == "6789"
    assert user.employer_name == "Acme Corp"

    assert len(logs) == 1
    assert logs[0].action == AuditAction.TENANT_ONBOARDING_COMPLETED
    assert logs[0].user_agent == "pytest"
    assert logs[0].details["lease_term"] == "12"


async def test_short_month_end_date_is_clamped(client, session_factory, tenant, unit):
    response = await client.post(
        "/api/onboarding/submit",
        json=application(unit.id, move_in_date="2027-08-31", lease_term="6"),
        headers=auth("tenant"),
    )

    async with session_factory() as session:
        lease = await session.get(Lease, uuid.UUID(response.json()["data"]["lease_id"]))
    assert lease.end_date == date(2028, 2, 29)


async def test_second_applicant_gets_conflict(client, db, session_factory, tenant, unit):
    await make_user(db, "late-applicant", UserRole.TENANT, status=UserStatus.PENDING)

    first = await client.post("/api/onboarding/submit", json=application(unit.id), headers=auth("tenant"))
    second = await client.post("/api/onboarding/submit", json=application(unit.id), headers=auth("late-applicant"))

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["error"] == "This unit is no longer available"
    async with session_factory() as session:
        leases = (await session.execute(select(Lease))).scalars().all()
    assert len(leases) == 1


async def test_unknown_unit(client, tenant):
    response = await client.post("/api/onboarding/submit", json=application(uuid.uuid4()), headers=auth("tenant"))

    assert response.status_code == 404


async def test_terms_must_be_accepted(client, tenant, unit):
    response = await client.post(
        "/api/onboarding/submit",
        json=application(unit.id, agreed_to_terms=False),
        headers=auth("tenant"),
    )

    assert response.status_code == 400
    assert "You must agree to the terms and conditions" in response.json()["error"]


async def test_ssn_must_be_four_digits(client, tenant, unit):
    response = await client.post(
        "/api/onboarding/submit",
        json=application(unit.id, ssn_last4="12a4"),
        headers=auth("tenant"),
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("ssn_last4:")


async def test_landlord_cannot_apply(client, landlord, unit):
    response = await client.post("/api/onboarding/submit", json=application(unit.id), headers=auth("landlord"))

    assert response.status_code == 403


async def test_pending_tenant_can_apply(client, db, unit):
    await make_user(db, "newcomer", UserRole.TENANT, status=UserStatus.PENDING)

    response = await client.post("/api/onboarding/submit", json=application(unit.id), headers=auth("newcomer"))

    assert response.status_code == 201


async def test_reserved_unit_leaves_available_list(client, tenant, unit):
    await client.post("/api/onboarding/submit", json=application(unit.id), headers=auth("tenant"))

    response = await client.get("/api/onboarding/available-units")

    assert response.json()["data"] == []

