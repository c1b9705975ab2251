"""Online and manual rent payments, refunds and stored payment methods."""

import uuid
from datetime import datetime

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import AuditLog
from app.models.enums import (
    AuditAction,
    NotificationCategory,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    UserRole,
)
from app.models.notification import Notification
from app.models.payment import Payment, StoredPaymentMethod
from app.models.user import User
from tests.conftest import auth, make_user


def payment_body(lease, **overrides) -> dict:
    body = {
        "lease_id": str(lease.id),
        "type": "RENT",
        "method": "DEBIT_CARD",
        "amount_cents": lease.monthly_rent_cents,
    }
    body.update(overrides)
    return body


async def start_payment(client, lease) -> dict:
    response = await client.post("/api/tenant/payments", json=payment_body(lease), headers=auth("tenant"))
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_create_payment_returns_client_secret(client, session_factory, gateway, tenant, active_lease):
    data = await start_payment(client, active_lease)

    assert data["client_secret"] == "pi_1_secret"
    assert data["payment"]["status"] == "PENDING"
    assert data["payment"]["stripe_payment_intent_id"] == "pi_1"
    assert data["payment"]["amount_cents"] == 150000

    async with session_factory() as session:
        user = await session.get(User, tenant.id)
    assert user.stripe_customer_id == "cus_1"


async def test_existing_customer_is_reused(client, gateway, active_lease):
    await start_payment(client, active_lease)
    await start_payment(client, active_lease)

    assert gateway.customers_created == 1


async def test_amount_must_be_positive(client, active_lease):
    response = await client.post(
        "/api/tenant/payments",
        json=payment_body(active_lease, amount_cents=0),
        headers=auth("tenant"),
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("amount_cents:")


async def test_cannot_pay_someone_elses_lease(client, db, active_lease):
    await make_user(db, "neighbour", UserRole.TENANT)

    response = await client.post("/api/tenant/payments", json=payment_body(active_lease), headers=auth("neighbour"))

    assert response.status_code == 403


async def test_status_refresh_completes_payment(client, session_factory, gateway, tenant, landlord, active_lease):
    data = await start_payment(client, active_lease)
    intent = gateway.intents["pi_1"]
    intent.status = "succeeded"
    intent.latest_charge = "ch_1"

    response = await client.get("/api/tenant/payments/status?payment_intent=pi_1", headers=auth("tenant"))

    assert response.status_code == 200
    payment = response.json()["data"]
    assert payment["id"] == data["payment"]["id"]
    assert payment["status"] == "COMPLETED"
    assert payment["processed_at"] is not None

    async with session_factory() as session:
        notes = (await session.execute(select(Notification))).scalars().all()
    assert {(n.user_id, n.title) for n in notes} == {
        (tenant.id, "Payment Confirmed"),
        (landlord.id, "Payment Received"),
    }
    assert {n.category for n in notes} == {NotificationCategory.PAYMENT_RECEIVED}


async def test_status_refresh_is_idempotent(client, session_factory, gateway, active_lease):
    await start_payment(client, active_lease)
    gateway.intents["pi_1"].status = "succeeded"

    await client.get("/api/tenant/payments/status?payment_intent=pi_1", headers=auth("tenant"))
    await client.get("/api/tenant/payments/status?payment_intent=pi_1", headers=auth("tenant"))

    async with session_factory() as session:
        notes = (await session.execute(select(Notification))).scalars().all()
    assert len(notes) == 2


async def test_status_for_unknown_intent(client, tenant):
    response = await client.get("/api/tenant/payments/status?payment_intent=pi_missing", headers=auth("tenant"))

    assert response.status_code == 404


async def test_tenant_lists_own_payments(client, active_lease):
    await start_payment(client, active_lease)

    pending = await client.get("/api/tenant/payments?status=PENDING", headers=auth("tenant"))
    completed = await client.get("/api/tenant/payments?status=COMPLETED", headers=auth("tenant"))

    assert len(pending.json()["data"]) == 1
    assert completed.json()["data"] == []


async def test_landlord_records_manual_payment(client, session_factory, landlord, tenant, active_lease):
    response = await client.post(
        "/api/landlord/payments",
        json={
            "lease_id": str(active_lease.id),
            "tenant_id": str(tenant.id),
            "type": "RENT",
            "method": "CASHIER_CHECK",
            "amount_cents": 150000,
            "check_number": "1042",
        },
        headers=auth("landlord"),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "COMPLETED"
    assert data["received_by_id"] == str(landlord.id)
    assert data["check_number"] == "1042"

    async with session_factory() as session:
        log = (await session.execute(select(AuditLog))).scalar_one()
    assert log.action == AuditAction.PAYMENT_RECORDED
    assert log.details == {"amount_cents": 150000, "method": "CASHIER_CHECK"}


async def test_manual_payment_rejects_online_methods(client, tenant, active_lease):
    response = await client.post(
        "/api/landlord/payments",
        json={
            "lease_id": str(active_lease.id),
            "tenant_id": str(tenant.id),
            "type": "RENT",
            "method": "CREDIT_CARD",
            "amount_cents": 150000,
        },
        headers=auth("landlord"),
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("method:")


async def test_manual_payment_tenant_must_hold_lease(client, db, active_lease):
    stranger = await make_user(db, "stranger", UserRole.TENANT)

    response = await client.post(
        "/api/landlord/payments",
        json={
            "lease_id": str(active_lease.id),
            "tenant_id": str(stranger.id),
            "type": "RENT",
            "method": "CASH",
            "amount_cents": 1000,
        },
        headers=auth("landlord"),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Tenant does not hold this lease"


@pytest.fixture
async def completed_online_payment(db, tenant, active_lease) -> Payment:
    payment = Payment(
        lease_id=active_lease.id,
        tenant_id=tenant.id,
        type=PaymentType.RENT,
        method=PaymentMethod.DEBIT_CARD,
        status=PaymentStatus.COMPLETED,
        amount_cents=150000,
        processed_at=datetime.utcnow(),
        stripe_payment_intent_id="pi_done",
    )
    db.add(payment)
    await db.commit()
    return payment


async def test_refund_goes_through_gateway(client, session_factory, gateway, completed_online_payment):
    response = await client.post(
        f"/api/landlord/payments/{completed_online_payment.id}/refund",
        json={"reason": "Double charged"},
        headers=auth("landlord"),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "REFUNDED"
    assert data["notes"] == "Refund: Double charged"
    assert gateway.refunds == ["pi_done"]

    async with session_factory() as session:
        log = (await session.execute(select(AuditLog))).scalar_one()
    assert log.action == AuditAction.PAYMENT_REFUNDED
    assert log.details["refund_id"] == "re_1"


async def test_refund_twice_is_rejected(client, gateway, completed_online_payment):
    url = f"/api/landlord/payments/{completed_online_payment.id}/refund"
    await client.post(url, json={}, headers=auth("landlord"))

    response = await client.post(url, json={}, headers=auth("landlord"))

    assert response.status_code == 400
    assert response.json()["error"] == "Only completed payments can be refunded"
    assert gateway.refunds == ["pi_done"]


async def test_declined_refund_leaves_payment_completed(client, session_factory, gateway, completed_online_payment):
    gateway.refund_error = "Charge already disputed"

    response = await client.post(
        f"/api/landlord/payments/{completed_online_payment.id}/refund",
        json={"reason": "Double charged"},
        headers=auth("landlord"),
    )

    assert response.status_code == 502
    assert response.json()["error"] == "Charge already disputed"
    async with session_factory() as session:
        stored = await session.get(Payment, completed_online_payment.id)
        logs = (await session.execute(select(AuditLog))).scalars().all()
    assert stored.status == PaymentStatus.COMPLETED
    assert stored.notes is None
    assert logs == []


async def test_unrecorded_refund_is_logged(client, gateway, completed_online_payment, monkeypatch, caplog):
    async def failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(AsyncSession, "commit", failing_commit)

    with pytest.raises(OperationalError):
        await client.post(
            f"/api/landlord/payments/{completed_online_payment.id}/refund",
            json={},
            headers=auth("landlord"),
        )

    assert gateway.refunds == ["pi_done"]
    errors = [r.getMessage() for r in caplog.records if r.levelname == "ERROR"]
    assert any("Refund re_1 issued" in message for message in errors)


async def test_other_landlord_cannot_refund(client, other_landlord, completed_online_payment):
    response = await client.post(
        f"/api/landlord/payments/{completed_online_payment.id}/refund",
        json={},
        headers=auth("other-landlord"),
    )

    assert response.status_code == 404


async def test_landlord_lists_payments_by_status(client, completed_online_payment, active_lease):
    await start_payment(client, active_lease)

    response = await client.get("/api/landlord/payments?status=COMPLETED", headers=auth("landlord"))

    assert [p["id"] for p in response.json()["data"]] == [str(completed_online_payment.id)]


async def test_setup_intent_for_new_method(client, session_factory, tenant):
    response = await client.post("/api/tenant/payment-methods", headers=auth("tenant"))

    assert response.status_code == 201
    assert response.json()["data"]["client_secret"] == "seti_1_secret"
    async with session_factory() as session:
        user = await session.get(User, tenant.id)
    assert user.stripe_customer_id == "cus_1"


async def test_list_and_remove_payment_methods(client, db, session_factory, tenant):
    db.add_all([
        StoredPaymentMethod(
            user_id=tenant.id,
            stripe_payment_method_id="pm_old",
            type="card",
            brand="visa",
            last4="4242",
            is_default=True,
        ),
        StoredPaymentMethod(
            user_id=tenant.id,
            stripe_payment_method_id="pm_bank",
            type="us_bank_account",
            bank_name="First Bank",
            last4="6789",
        ),
    ])
    await db.commit()

    listed = await client.get("/api/tenant/payment-methods", headers=auth("tenant"))
    methods = listed.json()["data"]
    assert [m["masked_number"] for m in methods] == ["****4242", "****6789"]

    removed = await client.delete(f"/api/tenant/payment-methods/{methods[0]['id']}", headers=auth("tenant"))
    assert removed.status_code == 200

    listed = await client.get("/api/tenant/payment-methods", headers=auth("tenant"))
    assert [m["last4"] for m in listed.json()["data"]] == ["6789"]
    async with session_factory() as session:
        stored = await session.get(StoredPaymentMethod, uuid.UUID(methods[0]["id"]))
    assert stored.is_active is False
    assert stored.is_default is False


async def test_remove_unknown_payment_method(client, tenant):
    response = await client.delete(f"/api/tenant/payment-methods/{uuid.uuid4()}", headers=auth("tenant"))

    assert response.status_code == 404
