"""Shared fixtures: in-memory database, authenticated clients, fake payment gateway."""

import json
import os
from datetime import date, timedelta
from typing import Any, Optional

from cryptography.fernet import Fernet

# Settings are read at import time of app.main
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["FIREBASE_PROJECT_ID"] = "strukture-test"
os.environ["ENCRYPTION_KEY"] = Fernet.generate_key().decode()
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("SMTP_HOST", None)
os.environ.pop("TELEGRAM_BOT_TOKEN", None)

import pytest
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.security import AuthenticatedUser, verify_firebase_token
from app.main import app
from app.models import Lease, Property, Unit, User
from app.models.enums import (
    LeaseStatus,
    PropertyType,
    UnitStatus,
    UserRole,
    UserStatus,
)
from app.services.payments import (
    IntentResult,
    PaymentGatewayError,
    PaymentMethodDetails,
    WebhookSignatureError,
    get_payment_gateway,
)

VALID_SIGNATURE = "t=1,v1=valid"


class FakeGateway:
    """In-memory stand-in for the Stripe gateway."""

    def __init__(self):
        self.intents: dict[str, IntentResult] = {}
        self.refunds: list[str] = []
        self.refund_error: Optional[str] = None
        self.customers_created = 0

    async def get_or_create_customer(self, user: User) -> str:
        if user.stripe_customer_id:
            return user.stripe_customer_id
        self.customers_created += 1
        return f"cus_{self.customers_created}"

    async def create_payment_intent(self, amount_cents: int, customer_id: str, metadata: dict) -> IntentResult:
        intent_id = f"pi_{len(self.intents) + 1}"
        intent = IntentResult(
            id=intent_id,
            client_secret=f"{intent_id}_secret",
            status="requires_payment_method",
        )
        self.intents[intent_id] = intent
        return intent

    async def retrieve_payment_intent(self, intent_id: str) -> IntentResult:
        return self.intents[intent_id]

    async def create_setup_intent(self, customer_id: str) -> IntentResult:
        return IntentResult(id="seti_1", client_secret="seti_1_secret", status="requires_payment_method")

    async def retrieve_payment_method(self, payment_method_id: str) -> PaymentMethodDetails:
        return PaymentMethodDetails(
            id=payment_method_id,
            type="card",
            brand="visa",
            last4="4242",
            exp_month=12,
            exp_year=2030,
        )

    async def refund(self, payment_intent_id: str, amount_cents: Optional[int] = None) -> str:
        if self.refund_error:
            raise PaymentGatewayError(self.refund_error)
        self.refunds.append(payment_intent_id)
        return f"re_{len(self.refunds)}"

    def construct_event(self, payload: bytes, sig_header: str) -> Any:
        if sig_header != VALID_SIGNATURE:
            raise WebhookSignatureError("Invalid signature")
        return json.loads(payload)


async def _token_as_uid(
    credentials: HTTPAuthorizationCredentials = Depends(HTTPBearer()),
) -> AuthenticatedUser:
    """The bearer token is taken to be the Firebase uid."""
    uid = credentials.credentials
    return AuthenticatedUser(uid=uid, email=f"{uid}@example.com", email_verified=True)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
async def client(session_factory, gateway):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[verify_firebase_token] = _token_as_uid
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def auth(uid: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {uid}"}


async def make_user(
    db: AsyncSession,
    uid: str,
    role: UserRole,
    status: UserStatus = UserStatus.ACTIVE,
    **fields,
) -> User:
    user = User(
        firebase_uid=uid,
        email=f"{uid}@example.com",
        first_name=uid.capitalize(),
        last_name="Test",
        role=role,
        status=status,
        **fields,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def landlord(db) -> User:
    return await make_user(db, "landlord", UserRole.LANDLORD)


@pytest.fixture
async def other_landlord(db) -> User:
    return await make_user(db, "other-landlord", UserRole.LANDLORD)


@pytest.fixture
async def tenant(db) -> User:
    return await make_user(db, "tenant", UserRole.TENANT)


@pytest.fixture
async def prop(db, landlord) -> Property:
    prop = Property(
        owner_id=landlord.id,
        name="Maple Court",
        property_type=PropertyType.APARTMENT,
        address_line1="12 Maple St",
        city="Springfield",
        state="IL",
        zip_code="62701",
        total_units=1,
        amenities=[],
    )
    db.add(prop)
    await db.commit()
    await db.refresh(prop)
    return prop


@pytest.fixture
async def unit(db, prop) -> Unit:
    unit = Unit(
        property_id=prop.id,
        unit_number="101",
        status=UnitStatus.VACANT,
        bedrooms=2,
        bathrooms=1.5,
        monthly_rent_cents=150000,
        deposit_amount_cents=150000,
        features=[],
    )
    db.add(unit)
    await db.commit()
    await db.refresh(unit)
    return unit


async def make_lease(
    db: AsyncSession,
    unit: Unit,
    tenant: User,
    status: LeaseStatus = LeaseStatus.ACTIVE,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Lease:
    start = start or date.today() - timedelta(days=30)
    lease = Lease(
        unit_id=unit.id,
        tenant_id=tenant.id,
        status=status,
        start_date=start,
        end_date=end or start + timedelta(days=365),
        monthly_rent_cents=unit.monthly_rent_cents,
        deposit_amount_cents=unit.deposit_amount_cents,
        late_fee_cents=5000,
    )
    db.add(lease)
    if status == LeaseStatus.ACTIVE:
        unit.status = UnitStatus.OCCUPIED
    await db.commit()
    await db.refresh(lease)
    return lease


@pytest.fixture
async def active_lease(db, unit, tenant) -> Lease:
    return await make_lease(db, unit, tenant)
